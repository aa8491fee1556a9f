"""
Code128 barcode splitting

A 60-digit fiscal payload does not fit a single printable Code128 symbol,
so it is printed as 2 to 6 linear barcodes. Each part is

    <prefix><sequence digit><data slice>

where the data slices are contiguous and together cover the payload.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

from furs_client.codes.formatter import DIGITS_PATTERN, Defaults
from furs_client.exceptions import (
    InvalidPartCountError,
    InvalidPayloadLengthError,
    ValidationError,
)


MIN_PARTS = 2
MAX_PARTS = 6


@dataclass(frozen=True)
class SplitRule:
    """Digits carried by each part and the literal prefix of each part"""
    digits_per_part: int
    prefix: str


# Values are payload digits per part; each barcode is prefix + sequence digit + digits
SPLIT_RULES: Dict[int, SplitRule] = {
    2: SplitRule(digits_per_part=30, prefix="4"),
    3: SplitRule(digits_per_part=20, prefix="4"),
    4: SplitRule(digits_per_part=15, prefix="44"),
    5: SplitRule(digits_per_part=12, prefix="4"),
    6: SplitRule(digits_per_part=10, prefix="4"),
}


def _check_rules() -> None:
    for parts, rule in SPLIT_RULES.items():
        if rule.digits_per_part * parts != Defaults.PAYLOAD_LENGTH:
            raise AssertionError(
                f"Split rule for {parts} parts covers "
                f"{rule.digits_per_part * parts} digits, not {Defaults.PAYLOAD_LENGTH}"
            )


_check_rules()


class BarcodeSplitter:
    """
    Splits a fiscal payload into Code128 parts and joins them back

    Example:
        >>> splitter = BarcodeSplitter()
        >>> parts = splitter.split(payload, 3)
        >>> splitter.join(parts) == payload
        True
    """

    def split(self, payload: str, parts: int = 3) -> List[str]:
        """
        Split a 60-digit payload into ``parts`` barcode strings

        Args:
            payload: 60-digit fiscal payload
            parts: Number of barcodes (2 to 6)

        Returns:
            Ordered list of barcode strings

        Raises:
            InvalidPartCountError: If parts is outside [2, 6]
            InvalidPayloadLengthError: If payload is not exactly 60 digits
        """
        rule = self.get_rule(parts)

        if (
            not isinstance(payload, str)
            or len(payload) != Defaults.PAYLOAD_LENGTH
            or not DIGITS_PATTERN.fullmatch(payload)
        ):
            raise InvalidPayloadLengthError()

        size = rule.digits_per_part
        return [
            f"{rule.prefix}{index}{payload[(index - 1) * size:index * size]}"
            for index in range(1, parts + 1)
        ]

    def join(self, barcode_parts: Sequence[str]) -> str:
        """
        Reassemble the payload from barcode strings in scan order

        Raises:
            InvalidPartCountError: If the number of parts is outside [2, 6]
            ValidationError: If a part has the wrong prefix, length or
                sequence digit
            InvalidPayloadLengthError: If the joined data is not 60 digits
        """
        parts = len(barcode_parts)
        rule = self.get_rule(parts)
        header_length = len(rule.prefix) + 1

        slices: List[str] = []
        for index, part in enumerate(barcode_parts, start=1):
            if not isinstance(part, str):
                raise ValidationError(
                    f"Part {index} must be a string",
                    field="parts",
                    invariant="isinstance(part, str)",
                )
            if not part.startswith(rule.prefix):
                raise ValidationError(
                    f"Part {index} does not start with prefix {rule.prefix!r}",
                    field="parts",
                    invariant=f"part.startswith({rule.prefix!r})",
                )
            if len(part) != header_length + rule.digits_per_part:
                raise ValidationError(
                    f"Part {index} must be {header_length + rule.digits_per_part} "
                    f"characters, got {len(part)}",
                    field="parts",
                    invariant="len(part) == len(prefix) + 1 + digits_per_part",
                )
            sequence = part[len(rule.prefix)]
            if sequence != str(index):
                raise ValidationError(
                    f"Part {index} has sequence digit {sequence!r}",
                    field="parts",
                    invariant="sequence digits are 1..N in order",
                )
            slices.append(part[header_length:])

        payload = "".join(slices)
        if not DIGITS_PATTERN.fullmatch(payload) or len(payload) != Defaults.PAYLOAD_LENGTH:
            raise InvalidPayloadLengthError()

        return payload

    @staticmethod
    def get_rule(parts: int) -> SplitRule:
        """Get the split rule for a part count"""
        if isinstance(parts, bool) or not isinstance(parts, int) or parts not in SPLIT_RULES:
            raise InvalidPartCountError()
        return SPLIT_RULES[parts]


def split_for_code128(payload: str, parts: int = 3) -> List[str]:
    """Split a payload into Code128 parts"""
    return BarcodeSplitter().split(payload, parts)
