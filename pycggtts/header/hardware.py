"""Receiver and IMS hardware descriptors."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Hardware:
    """Hardware descriptor used for both the RCVR and IMS header fields.

    Attributes:
        manufacturer: Manufacturer name
        model: Model name
        serial_number: Serial number
        year: Year of first operation
        release: Software/firmware release
    """

    manufacturer: str = ""
    model: str = ""
    serial_number: str = ""
    year: int = 0
    release: str = ""

    def __post_init__(self):
        for name in ("manufacturer", "model", "serial_number", "release"):
            value = getattr(self, name)
            if "\n" in value or "\r" in value:
                raise ValueError(f"hardware {name} contains a line break")
            if not value.isascii():
                raise ValueError(f"hardware {name} is not ASCII: {value!r}")
        if not 0 <= self.year <= 0xFFFF:
            raise ValueError(f"invalid hardware year: {self.year}")

    @classmethod
    def parse(cls, text: str) -> "Hardware":
        """Parse '<manufacturer> <model> <serial> <year> <release>'.

        Raises:
            ValueError: On a wrong number of fields or a non-numeric year
        """
        items = text.split()
        if len(items) != 5:
            raise ValueError(f"expecting 5 hardware fields, got {len(items)}: {text!r}")
        manufacturer, model, serial_number, year, release = items
        if not year.isdigit():
            raise ValueError(f"invalid hardware year: {year!r}")
        return cls(manufacturer, model, serial_number, int(year), release)

    def with_manufacturer(self, manufacturer: str) -> "Hardware":
        return replace(self, manufacturer=manufacturer)

    def with_model(self, model: str) -> "Hardware":
        return replace(self, model=model)

    def with_serial_number(self, serial_number: str) -> "Hardware":
        return replace(self, serial_number=serial_number)

    def with_release_year(self, year: int) -> "Hardware":
        return replace(self, year=year)

    def with_release_version(self, release: str) -> "Hardware":
        return replace(self, release=release)

    def __str__(self) -> str:
        return f"{self.manufacturer} {self.model} {self.serial_number} {self.year} {self.release}"
