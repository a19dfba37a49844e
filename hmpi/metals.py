"""Metal vocabulary: element symbols and the names they are reported under."""
from types import MappingProxyType

METALS = MappingProxyType({
    "As": "Arsenic",
    "Cd": "Cadmium",
    "Co": "Cobalt",
    "Cr": "Chromium",
    "Cu": "Copper",
    "Fe": "Iron",
    "Hg": "Mercury",
    "Mn": "Manganese",
    "Ni": "Nickel",
    "Pb": "Lead",
    "Se": "Selenium",
    "Zn": "Zinc",
})

_LOOKUP = {}
for _symbol, _name in METALS.items():
    _LOOKUP[_symbol.lower()] = _symbol
    _LOOKUP[_name.lower()] = _symbol


def canonical_metal(name: str) -> str:
    """
    Map a metal name to its element symbol.

    "Lead", "lead", "PB" and "Pb" all give "Pb". Names outside the
    vocabulary come back stripped but otherwise untouched, so a limit table
    can still define them.
    """
    key = str(name).strip()
    return _LOOKUP.get(key.lower(), key)
