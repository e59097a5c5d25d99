"""
Commission engine package.

Contains modular services for CPA processing:
- config: Fixed business constants (base amounts, bonus, thresholds)
- category_config_provider: Category/level rate lookup
- hierarchy_resolver: Sponsor chain resolution
- transaction_validator: Validation models 1.1 and 1.2
- inactivity_decay: Decay percentage for inactive affiliates
- commission_distributor: CPA pool distribution
- indication_bonus_processor: One-time indication bonus
- progression_evaluator: Category/level progression
- cpa_pipeline: Orchestration of the above
- commission_lifecycle: Status transitions after calculation
"""

from commission_engine.services.commission.category_config_provider import (
    CategoryConfig,
    CategoryConfigProvider,
)
from commission_engine.services.commission.commission_distributor import (
    CommissionDistributor,
    DistributionResult,
)
from commission_engine.services.commission.commission_lifecycle import (
    ALLOWED_TRANSITIONS,
    CommissionLifecycleService,
)
from commission_engine.services.commission.config import (
    CPA_BASE_AMOUNTS,
    CPA_POOL_TOTAL,
    HIERARCHY_DEPTH,
    INDICATION_BONUS,
)
from commission_engine.services.commission.cpa_pipeline import (
    CpaCalculationResult,
    CpaPipeline,
)
from commission_engine.services.commission.hierarchy_resolver import (
    HierarchyResolver,
)
from commission_engine.services.commission.inactivity_decay import (
    InactivityDecayCalculator,
)
from commission_engine.services.commission.indication_bonus_processor import (
    IndicationBonusProcessor,
    IndicationBonusResult,
)
from commission_engine.services.commission.progression_evaluator import (
    ProgressionEvaluator,
    ProgressionResult,
)
from commission_engine.services.commission.transaction_validator import (
    CpaValidationInput,
    TransactionValidator,
)

__all__ = [
    # Configuration
    "CPA_BASE_AMOUNTS",
    "CPA_POOL_TOTAL",
    "HIERARCHY_DEPTH",
    "INDICATION_BONUS",
    # Components
    "CategoryConfig",
    "CategoryConfigProvider",
    "CommissionDistributor",
    "DistributionResult",
    "HierarchyResolver",
    "InactivityDecayCalculator",
    "IndicationBonusProcessor",
    "IndicationBonusResult",
    "ProgressionEvaluator",
    "ProgressionResult",
    "TransactionValidator",
    "CpaValidationInput",
    # Orchestration
    "CpaPipeline",
    "CpaCalculationResult",
    "CommissionLifecycleService",
    "ALLOWED_TRANSITIONS",
]
