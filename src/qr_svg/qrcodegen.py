"""QR Code encoder (byte mode, error correction level L, versions 1-6) based on ISO/IEC 18004."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .errors import PayloadTooLarge

logger = logging.getLogger(__name__)

Grid = List[List[bool]]
Coordinate = Tuple[int, int]

_PRIMITIVE_POLYNOMIAL = 0x11D


def _build_gf_tables() -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
    exp = [0] * 512
    log = [0] * 256
    x = 1
    for i in range(255):
        exp[i] = x
        log[x] = i
        x <<= 1
        if x & 0x100:
            x ^= _PRIMITIVE_POLYNOMIAL
    for i in range(255, 512):
        exp[i] = exp[i - 255]
    return tuple(exp), tuple(log)


GF_EXP, GF_LOG = _build_gf_tables()


def gf_multiply(a: int, b: int) -> int:
    """Multiply two elements of GF(2^8)."""
    if a == 0 or b == 0:
        return 0
    return GF_EXP[GF_LOG[a] + GF_LOG[b]]


@dataclass(frozen=True)
class VersionInfo:
    total_codewords: int
    data_codewords: int
    ecc_codewords_per_block: int
    num_blocks: int
    data_codewords_per_block: int
    byte_capacity: int
    alignment_positions: Tuple[int, ...]

    @property
    def data_capacity_bits(self) -> int:
        return self.data_codewords * 8


class QrCode:
    MIN_VERSION = 1
    MAX_VERSION = 6

    _VERSIONS: Dict[int, VersionInfo] = {
        1: VersionInfo(26, 19, 7, 1, 19, 17, ()),
        2: VersionInfo(44, 34, 10, 1, 34, 32, (6, 18)),
        3: VersionInfo(70, 55, 15, 1, 55, 53, (6, 22)),
        4: VersionInfo(100, 80, 20, 1, 80, 78, (6, 26)),
        5: VersionInfo(134, 108, 26, 1, 108, 106, (6, 30)),
        6: VersionInfo(172, 136, 18, 2, 68, 134, (6, 34)),
    }

    # Error correction level L combined with mask 0-7, BCH encoded and XORed with 0x5412.
    FORMAT_INFO = (0x77C4, 0x72F3, 0x7DAA, 0x789D, 0x662F, 0x6318, 0x6C41, 0x6976)

    def __init__(self, version: int, data_codewords: Sequence[int], mask: Optional[int] = None):
        if not (QrCode.MIN_VERSION <= version <= QrCode.MAX_VERSION):
            raise ValueError("Version number out of range")
        if mask is not None and not (0 <= mask <= 7):
            raise ValueError("Mask out of range")
        info = QrCode.version_info(version)
        if len(data_codewords) != info.data_codewords:
            raise ValueError(
                f"version {version} needs {info.data_codewords} data codewords, got {len(data_codewords)}"
            )
        self.version = version
        self.size = version * 4 + 17
        self.modules, self.reserved = _create_function_template(version)
        self.codewords = add_ecc_and_interleave(data_codewords, version)
        self._draw_codewords(self.codewords)

        self.mask_penalties: Tuple[int, ...] = tuple(
            penalty_score(self._masked_copy(candidate)) for candidate in range(8)
        )
        if mask is None:
            mask = 0
            for candidate in range(1, 8):
                if self.mask_penalties[candidate] < self.mask_penalties[mask]:
                    mask = candidate
        self.mask = mask
        _apply_mask(self.modules, self.reserved, mask)
        self._draw_format_bits(mask)
        logger.debug(
            "Built version %d symbol with mask %d (penalty %d)",
            version,
            mask,
            self.mask_penalties[mask],
        )

    @staticmethod
    def encode_text(text: str, mask: Optional[int] = None) -> "QrCode":
        return QrCode.encode_binary(text.encode("utf-8"), mask)

    @staticmethod
    def encode_binary(data: bytes, mask: Optional[int] = None) -> "QrCode":
        version = QrCode.choose_version(len(data))
        return QrCode(version, build_data_codewords(data, version), mask)

    @staticmethod
    def choose_version(data_len: int) -> int:
        for version in range(QrCode.MIN_VERSION, QrCode.MAX_VERSION + 1):
            if QrCode._VERSIONS[version].byte_capacity >= data_len:
                return version
        raise PayloadTooLarge(data_len, QrCode._VERSIONS[QrCode.MAX_VERSION].byte_capacity)

    @staticmethod
    def version_info(version: int) -> VersionInfo:
        try:
            return QrCode._VERSIONS[version]
        except KeyError as exc:
            raise ValueError(f"unsupported version: {version}") from exc

    def get_matrix(self) -> Grid:
        return [row[:] for row in self.modules]

    def _masked_copy(self, mask: int) -> Grid:
        candidate = self.get_matrix()
        _apply_mask(candidate, self.reserved, mask)
        return candidate

    def _draw_codewords(self, codewords: Sequence[int]) -> None:
        size = self.size
        total_bits = len(codewords) * 8
        i = 0
        upward = True
        right = size - 1
        while right >= 1:
            if right == 6:
                right = 5
            for offset in range(size):
                y = size - 1 - offset if upward else offset
                for dx in range(2):
                    x = right - dx
                    if self.reserved[y][x]:
                        continue
                    if i < total_bits:
                        self.modules[y][x] = ((codewords[i >> 3] >> (7 - (i & 7))) & 1) == 1
                        i += 1
                    else:
                        self.modules[y][x] = False
            right -= 2
            upward = not upward

    def _draw_format_bits(self, mask: int) -> None:
        bits = QrCode.FORMAT_INFO[mask]
        for positions in format_info_positions(self.size):
            for i, (y, x) in enumerate(positions):
                self.modules[y][x] = ((bits >> i) & 1) == 1


class BitBuffer:
    def __init__(self) -> None:
        self.bits: List[int] = []

    def __len__(self) -> int:
        return len(self.bits)

    def append_bits(self, value: int, length: int) -> None:
        if length < 0 or value >> length:
            raise ValueError("Value out of range")
        for i in reversed(range(length)):
            self.bits.append((value >> i) & 1)

    def append_terminator(self, capacity_bits: int) -> None:
        self.bits.extend([0] * max(0, min(4, capacity_bits - len(self.bits))))

    def pad_to_byte(self) -> None:
        self.bits.extend([0] * ((8 - len(self.bits) % 8) % 8))

    def to_codewords(self) -> List[int]:
        codewords = []
        for i in range(0, len(self.bits), 8):
            chunk = 0
            for bit in self.bits[i:i + 8]:
                chunk = (chunk << 1) | bit
            codewords.append(chunk)
        return codewords

    @staticmethod
    def pad_codewords(count: int) -> List[int]:
        pads = [0xEC, 0x11]
        return [pads[i % 2] for i in range(count)]


def build_data_codewords(data: bytes, version: int) -> List[int]:
    """Return the padded data codewords for ``data`` in byte mode at ``version``."""
    info = QrCode.version_info(version)
    capacity_bits = info.data_capacity_bits
    char_count_bits = 8 if version < 10 else 16
    if 4 + char_count_bits + len(data) * 8 > capacity_bits:
        raise PayloadTooLarge(len(data), info.byte_capacity)
    bb = BitBuffer()
    bb.append_bits(0b0100, 4)
    bb.append_bits(len(data), char_count_bits)
    for b in data:
        bb.append_bits(b, 8)
    bb.append_terminator(capacity_bits)
    bb.pad_to_byte()
    codewords = bb.to_codewords()
    codewords.extend(bb.pad_codewords(info.data_codewords - len(codewords)))
    return codewords


def add_ecc_and_interleave(data: Sequence[int], version: int) -> List[int]:
    info = QrCode.version_info(version)
    rs = ReedSolomonGenerator(info.ecc_codewords_per_block)
    blocks = []
    ecc_blocks = []
    for k in range(0, info.num_blocks * info.data_codewords_per_block, info.data_codewords_per_block):
        block = list(data[k:k + info.data_codewords_per_block])
        blocks.append(block)
        ecc_blocks.append(rs.remainder(block))

    result = []
    for i in range(max(len(block) for block in blocks)):
        for block in blocks:
            if i < len(block):
                result.append(block[i])
    for i in range(info.ecc_codewords_per_block):
        for ecc in ecc_blocks:
            result.append(ecc[i])
    assert len(result) == info.total_codewords
    return result


class ReedSolomonGenerator:
    def __init__(self, degree: int):
        if degree <= 0 or degree > 255:
            raise ValueError("Degree out of range")
        self.degree = degree
        self.coefficients = [1]
        for i in range(degree):
            self.coefficients = self._multiply(self.coefficients, [1, GF_EXP[i]])

    @staticmethod
    def _multiply(p: Sequence[int], q: Sequence[int]) -> List[int]:
        result = [0] * (len(p) + len(q) - 1)
        for i, a in enumerate(p):
            for j, b in enumerate(q):
                result[i + j] ^= gf_multiply(a, b)
        return result

    def remainder(self, data: Sequence[int]) -> List[int]:
        result = [0] * self.degree
        for byte in data:
            factor = byte ^ result[0]
            result = result[1:] + [0]
            for i in range(self.degree):
                result[i] ^= gf_multiply(self.coefficients[i + 1], factor)
        return result


def format_info_positions(size: int) -> Tuple[List[Coordinate], List[Coordinate]]:
    """Return the ``(row, col)`` cells holding format bits 0..14 for both copies.

    The first list runs around the top-left finder pattern, the second is
    split between the top-right and bottom-left finder patterns.
    """
    primary = [(i, 8) for i in range(6)]
    primary += [(7, 8), (8, 8), (8, 7)]
    primary += [(8, 14 - i) for i in range(9, 15)]
    secondary = [(8, size - 1 - i) for i in range(8)]
    secondary += [(size - 15 + i, 8) for i in range(8, 15)]
    return primary, secondary


def _create_function_template(version: int) -> Tuple[Grid, Grid]:
    size = version * 4 + 17
    modules = [[False] * size for _ in range(size)]
    reserved = [[False] * size for _ in range(size)]
    _draw_finder_patterns(modules, reserved)
    _draw_alignment_patterns(modules, reserved, QrCode.version_info(version).alignment_positions)
    _draw_timing_patterns(modules, reserved)
    _draw_dark_module(modules, reserved, version)
    _reserve_format_areas(reserved)
    return modules, reserved


def _draw_finder_patterns(modules: Grid, reserved: Grid) -> None:
    size = len(modules)
    for cy, cx in ((3, 3), (3, size - 4), (size - 4, 3)):
        for dy in range(-4, 5):
            for dx in range(-4, 5):
                y = cy + dy
                x = cx + dx
                if not (0 <= x < size and 0 <= y < size):
                    continue
                ring = max(abs(dx), abs(dy))
                # ring 4 is the separator, ring 2 the light band between frame and eye
                modules[y][x] = ring not in (2, 4)
                reserved[y][x] = True


def _draw_alignment_patterns(modules: Grid, reserved: Grid, positions: Sequence[int]) -> None:
    size = len(modules)
    for r in positions:
        for c in positions:
            if (r < 9 and c < 9) or (r < 9 and c > size - 10) or (r > size - 10 and c < 9):
                continue
            for dy in range(-2, 3):
                for dx in range(-2, 3):
                    modules[r + dy][c + dx] = max(abs(dx), abs(dy)) != 1
                    reserved[r + dy][c + dx] = True


def _draw_timing_patterns(modules: Grid, reserved: Grid) -> None:
    size = len(modules)
    for i in range(8, size - 8):
        modules[6][i] = i % 2 == 0
        modules[i][6] = i % 2 == 0
        reserved[6][i] = True
        reserved[i][6] = True


def _draw_dark_module(modules: Grid, reserved: Grid, version: int) -> None:
    row = 4 * version + 9
    modules[row][8] = True
    reserved[row][8] = True


def _reserve_format_areas(reserved: Grid) -> None:
    for positions in format_info_positions(len(reserved)):
        for y, x in positions:
            reserved[y][x] = True


_MASK_PATTERNS: Tuple[Callable[[int, int], bool], ...] = (
    lambda r, c: (r + c) % 2 == 0,
    lambda r, c: r % 2 == 0,
    lambda r, c: c % 3 == 0,
    lambda r, c: (r + c) % 3 == 0,
    lambda r, c: (r // 2 + c // 3) % 2 == 0,
    lambda r, c: (r * c) % 2 + (r * c) % 3 == 0,
    lambda r, c: ((r * c) % 2 + (r * c) % 3) % 2 == 0,
    lambda r, c: ((r + c) % 2 + (r * c) % 3) % 2 == 0,
)


def _apply_mask(modules: Grid, reserved: Grid, mask: int) -> None:
    invert = _MASK_PATTERNS[mask]
    for y, row in enumerate(modules):
        for x in range(len(row)):
            if not reserved[y][x] and invert(y, x):
                row[x] = not row[x]


_FINDER_LIKE = (
    (True, False, True, True, True, False, True, False, False, False, False),
    (False, False, False, False, True, False, True, True, True, False, True),
)


def penalty_score(modules: Sequence[Sequence[bool]]) -> int:
    """Score a candidate matrix with the four mask evaluation rules; lower is better."""
    size = len(modules)
    columns = [[modules[y][x] for y in range(size)] for x in range(size)]
    lines = [list(row) for row in modules] + columns
    score = 0
    for line in lines:
        score += _penalty_consecutive(line)
        score += _penalty_pattern(line)
    for y in range(size - 1):
        for x in range(size - 1):
            color = modules[y][x]
            if color == modules[y][x + 1] == modules[y + 1][x] == modules[y + 1][x + 1]:
                score += 3
    dark = sum(sum(1 for cell in row if cell) for row in modules)
    previous_five = dark * 100 // (size * size) // 5 * 5
    score += min(abs(previous_five - 50), abs(previous_five + 5 - 50)) // 5 * 10
    return score


def _penalty_consecutive(line: Sequence[bool]) -> int:
    score = 0
    run_color = None
    run_length = 0
    for color in line:
        if color == run_color:
            run_length += 1
            if run_length == 5:
                score += 3
            elif run_length > 5:
                score += 1
        else:
            run_color = color
            run_length = 1
    return score


def _penalty_pattern(line: Sequence[bool]) -> int:
    score = 0
    width = len(_FINDER_LIKE[0])
    for i in range(len(line) - width + 1):
        if tuple(line[i:i + width]) in _FINDER_LIKE:
            score += 40
    return score
