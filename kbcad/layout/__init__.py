from .kle import keymap_from_kle
