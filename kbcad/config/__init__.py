from .hardware import hw
