"""Ingredient domain entity: one line of a recipe (name, free-text quantity, unit)."""


def quantity_text(value) -> str:
    '''Returns the free-text form of a quantity; numbers keep their shortest form.'''
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


class Ingredient:
    def __init__(self, name: str = "", quantity: str = "", unit: str = ""):
        self.name = name
        self.quantity = quantity_text(quantity)
        self.unit = unit or ""

    def __str__(self) -> str:
        return " ".join(p for p in (self.quantity, self.unit, self.name) if p)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates an Ingredient object from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return Ingredient(
            name=str(d.get("name") or "").strip(),
            quantity=d.get("quantity", ""),
            unit=str(d.get("unit") or "").strip(),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "quantity": self.quantity,
            "unit": self.unit,
        }
