"""
factoryfloor: a blocks world on a row of factory floor positions

Every position starts with one block numbered after it. Blocks are moved
"onto" or "over" other blocks, alone ("move") or together with everything
stacked on them ("pile"); disturbed blocks go back to their home positions.

Example Usage:
```python
from factoryfloor import FactoryFloor

floor = FactoryFloor.new_instance(4)
floor.move_onto(1, 2)
print(floor)  # 0: 0 | 1: | 2: 2 1 | 3: 3
```

Command-line Usage:
```bash
factoryfloor show --positions 10
factoryfloor run --config eval_configs/factory_floor.yaml --script moves.txt
factoryfloor create-config --output config.yaml
```
"""

from factoryfloor.core import (
    FactoryFloor,
    FloorError,
    InvalidArgumentError,
    NotFoundError,
    MoveMode,
    Config,
    load_config,
    validate_config,
)
from factoryfloor.session import FloorSession, parse_command

__version__ = "0.1.0"

__all__ = [
    "FactoryFloor",
    "FloorError",
    "InvalidArgumentError",
    "NotFoundError",
    "MoveMode",
    "Config",
    "load_config",
    "validate_config",
    "FloorSession",
    "parse_command",
]
