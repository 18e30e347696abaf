"""
This initialization file serves as the main entry point for the body evolution
package, exposing the public API through a single namespace.

It imports and re-exports the state records (Body, System, EvolveState), the variable
registry (VarType, UpdateMatrix and its parts, MatrixValidator), adaptive timestep
control (TimestepSelector), the two update schemes behind the Integrator, the
EvolutionDriver with its halt protocol and output recorder, configuration and its YAML
loader, the Simulation facade and the physics module interface with its reference
modules. It assumes numpy, pandas and PyYAML are installed.
"""

from .evolve_constants import METHOD_EULER, METHOD_RK4
from .sim_config import EvolveConfig
from .config_io import load_config, save_config
from .reporting import diag_print, rate_limited_print


from .body import Body
from .system import System
from .var_type import VarType
from .update_matrix import (
    Equation,
    FunctionRule,
    PolarReference,
    Rule,
    UpdateMatrix,
    UpdateMatrixError,
    Variable,
)
from .matrix_validator import MatrixValidator
from .evolve_state import EvolveState
from .timestep_manager import TimestepSelector, assign_dt, next_output_time
from .integration_scheme_base import IntegrationScheme
from .euler_scheme import EulerScheme
from .rk4_scheme import RungeKutta4Scheme
from .integrator import Integrator


from .halt import (
    Halt,
    HaltChecker,
    halt_max_value,
    halt_min_value,
    halt_positive_derivative,
)
from .output import OutputRecorder
from .evolution import EvolutionDriver, EvolveResult, EvolveStatus
from .simulation import Simulation
from .physics_utils import props_aux_general, semi_to_mean_motion

from .modules import (
    ConstantRateModule,
    EnvelopeLossModule,
    ExplicitTrackModule,
    ExponentialDecayModule,
    MultiModule,
    PhysicsModule,
)


__all__ = [
    "METHOD_EULER",
    "METHOD_RK4",
    "EvolveConfig",
    "load_config",
    "save_config",
    "diag_print",
    "rate_limited_print",
    "Body",
    "System",
    "VarType",
    "Equation",
    "FunctionRule",
    "PolarReference",
    "Rule",
    "UpdateMatrix",
    "UpdateMatrixError",
    "Variable",
    "MatrixValidator",
    "EvolveState",
    "TimestepSelector",
    "assign_dt",
    "next_output_time",
    "IntegrationScheme",
    "EulerScheme",
    "RungeKutta4Scheme",
    "Integrator",
    "Halt",
    "HaltChecker",
    "halt_max_value",
    "halt_min_value",
    "halt_positive_derivative",
    "OutputRecorder",
    "EvolutionDriver",
    "EvolveResult",
    "EvolveStatus",
    "Simulation",
    "props_aux_general",
    "semi_to_mean_motion",
    "ConstantRateModule",
    "EnvelopeLossModule",
    "ExplicitTrackModule",
    "ExponentialDecayModule",
    "MultiModule",
    "PhysicsModule",
]
