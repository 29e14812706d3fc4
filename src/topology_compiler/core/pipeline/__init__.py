"""
# Pipeline Core (Topology Compiler)

Um passe de compilação é modelado como um **DAG explícito de Steps**, um por
componente do Desired State:

- cada Step declara identidade, papel (`StepKind`) e dependências
- a execução é coordenada exclusivamente pelo Engine
- o estado compartilhado (entradas, componentes calculados, logs) é mediado
  pelo `RunContext`

## Componentes

- **types**: `StepStatus`, `StepKind`, `StepResult`
- **step**: `Step` (Protocol)
- **context**: `RunContext`
- **registry**: `StepRegistry`, `DuplicateStepIdError`
"""

from .context import RunContext  # noqa: F401
from .registry import DuplicateStepIdError, StepRegistry  # noqa: F401
from .step import Step  # noqa: F401
from .types import StepKind, StepResult, StepStatus  # noqa: F401
