"""
Seeded Random - Linear Congruential Generator
"""

from typing import List, TypeVar, Union

T = TypeVar("T")

_MODULUS = 2 ** 32
_MULTIPLIER = 1664525
_INCREMENT = 1013904223


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - _MODULUS if value & 0x80000000 else value


class SeededRandom:
    """
    Bộ sinh số ngẫu nhiên deterministic từ seed

    seed = (seed * 1664525 + 1013904223) mod 2^32   (hằng số Numerical Recipes)
    next() = seed / 2^32

    Cùng một seed luôn cho cùng một dãy số, giống hệt bản TypeScript/Go/Rust.
    Mỗi lần xáo tạo một instance mới, không dùng chung giữa các request.
    """

    def __init__(self, seed: Union[str, int]):
        """
        Args:
            seed: Chuỗi (được hash về số nguyên 32-bit) hoặc số nguyên
        """
        if isinstance(seed, str):
            state = self.hash_string(seed)
        else:
            state = int(seed) % _MODULUS

        if state == 0:
            state = 1

        self._state = state

    @staticmethod
    def hash_string(text: str) -> int:
        """
        Hash chuỗi thành số nguyên không âm: hash = hash*31 + code_unit

        Tính trên UTF-16 code unit và ép về signed 32-bit sau mỗi bước,
        sau đó lấy trị tuyệt đối.
        """
        encoded = text.encode("utf-16-le")
        hash_value = 0
        for i in range(0, len(encoded), 2):
            code_unit = encoded[i] | (encoded[i + 1] << 8)
            hash_value = _to_int32(hash_value * 31 + code_unit)
        return abs(hash_value)

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> float:
        """Số ngẫu nhiên tiếp theo trong [0, 1)"""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self._state / _MODULUS

    def next_int(self, low: int, high: int) -> int:
        """Số nguyên ngẫu nhiên trong [low, high)"""
        return int(self.next() * (high - low)) + low

    def shuffle(self, items: List[T]) -> List[T]:
        """
        Xáo danh sách bằng Fisher-Yates, trả về list mới

        Args:
            items: Danh sách cần xáo (không bị thay đổi)

        Returns:
            Bản sao đã xáo
        """
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = int(self.next() * (i + 1))
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled
