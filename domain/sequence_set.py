# domain/sequence_set.py
from __future__ import annotations
from dataclasses import dataclass

from domain.errors import RangeParseError

# None representa "*" (el mayor número de secuencia del buzón)
Bound = int | None


def _parse_number(token: str, text: str) -> Bound:
    if token == "*":
        return None
    if not token.isdigit() or not token.isascii():
        raise RangeParseError(f"Rango inválido {text!r}: {token!r} no es un número")
    value = int(token)
    if value == 0:
        raise RangeParseError(f"Rango inválido {text!r}: los números de secuencia empiezan en 1")
    return value


@dataclass(frozen=True)
class SequenceSet:
    ranges: tuple[tuple[Bound, Bound], ...] = ()

    @classmethod
    def parse(cls, text: str) -> "SequenceSet":
        """
        Gramática IMAP de sequence-set: elementos separados por comas,
        cada uno `n`, `*`, `n:m`, `n:*` o `*:n`.
        """
        if not text:
            raise RangeParseError("Rango vacío")
        ranges: list[tuple[Bound, Bound]] = []
        for item in text.split(","):
            if not item:
                raise RangeParseError(f"Rango inválido {text!r}: elemento vacío")
            pieces = item.split(":")
            if len(pieces) == 1:
                n = _parse_number(pieces[0], text)
                ranges.append((n, n))
            elif len(pieces) == 2:
                ranges.append((_parse_number(pieces[0], text), _parse_number(pieces[1], text)))
            else:
                raise RangeParseError(f"Rango inválido {text!r}: {item!r}")
        return cls(tuple(ranges))

    @classmethod
    def full(cls, count: int) -> "SequenceSet":
        if count <= 0:
            return cls()
        return cls(((1, count),))

    @property
    def is_empty(self) -> bool:
        return not self.ranges

    def expand(self, max_seq: int) -> list[int]:
        """Miembros (ascendentes, sin duplicados) para un buzón con `max_seq` mensajes."""
        members: set[int] = set()
        for start, stop in self.ranges:
            lo = max_seq if start is None else start
            hi = max_seq if stop is None else stop
            if lo > hi:
                lo, hi = hi, lo
            members.update(range(max(lo, 1), min(hi, max_seq) + 1))
        return sorted(members)

    def __str__(self) -> str:
        def fmt(b: Bound) -> str:
            return "*" if b is None else str(b)

        parts = []
        for start, stop in self.ranges:
            parts.append(fmt(start) if start == stop else f"{fmt(start)}:{fmt(stop)}")
        return ",".join(parts)
