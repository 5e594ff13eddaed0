"""
Carrier Engine - 상염색체 열성 질환 보인자 위험도 계산기

가계도와 집단 보인자 빈도로부터 구성원별 유전자형 확률을 추정하는 엔진
"""

from .models import (
    Gender,
    Allele,
    GenotypeState,
)

from .population import (
    CONDITION_NAMES,
    DEFAULT_FREQUENCY_TABLE,
    PopulationFrequencyTable,
)

from .genetics import GeneticsEngine

from .individual import Individual

from .pedigree import (
    Pedigree,
    PedigreeStructureError,
)

from .annealing import (
    AnnealingConfig,
    AnnealingOptimizer,
    OptimizerState,
)

from .powell import (
    PowellConfig,
    PowellOptimizer,
    PowellResult,
)

from .validator import (
    PedigreeFormatError,
    PedigreeValidator,
    validate_pedigree_object,
)

from .serialization import (
    PedigreeDocument,
    parse_pedigree_object,
    read_pedigree,
    pedigree_to_object,
    write_pedigree,
)

from .layout import auto_layout

from .fraction import (
    probability_to_fraction,
    format_probability,
)

from .data_table import ProbabilityTableGenerator

from .visualizer import (
    GridConfig,
    PedigreeVisualizer,
)

from .scenarios import (
    PREDEFINED_SCENARIOS,
    load_scenario,
)

from .analysis import (
    AnalysisResult,
    analyze_pedigree,
    pedigree_report,
)


__version__ = "1.0.0"
__all__ = [
    # Models
    "Gender",
    "Allele",
    "GenotypeState",
    "Individual",

    # Population
    "CONDITION_NAMES",
    "DEFAULT_FREQUENCY_TABLE",
    "PopulationFrequencyTable",

    # Genetics / Pedigree
    "GeneticsEngine",
    "Pedigree",
    "PedigreeStructureError",

    # Optimizers
    "AnnealingConfig",
    "AnnealingOptimizer",
    "OptimizerState",
    "PowellConfig",
    "PowellOptimizer",
    "PowellResult",

    # Validator / IO
    "PedigreeFormatError",
    "PedigreeValidator",
    "validate_pedigree_object",
    "PedigreeDocument",
    "parse_pedigree_object",
    "read_pedigree",
    "pedigree_to_object",
    "write_pedigree",

    # Presentation
    "auto_layout",
    "probability_to_fraction",
    "format_probability",
    "ProbabilityTableGenerator",
    "GridConfig",
    "PedigreeVisualizer",

    # Scenarios / Analysis
    "PREDEFINED_SCENARIOS",
    "load_scenario",
    "AnalysisResult",
    "analyze_pedigree",
    "pedigree_report",
]
