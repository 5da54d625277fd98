"""
String enum definitions for protocol and rule concepts.
"""

from enum import Enum, StrEnum


class EventType(StrEnum):
    """mjai event types the tracker consumes."""

    START_GAME = "start_game"
    START_KYOKU = "start_kyoku"
    TSUMO = "tsumo"
    DAHAI = "dahai"
    CHI = "chi"
    PON = "pon"
    DAIMINKAN = "daiminkan"
    KAKAN = "kakan"
    ANKAN = "ankan"
    DORA = "dora"
    REACH = "reach"
    REACH_ACCEPTED = "reach_accepted"
    HORA = "hora"
    RYUKYOKU = "ryukyoku"
    END_KYOKU = "end_kyoku"
    END_GAME = "end_game"


class ActionType(StrEnum):
    """mjai reaction types a seat can send back."""

    DAHAI = "dahai"
    CHI = "chi"
    PON = "pon"
    DAIMINKAN = "daiminkan"
    KAKAN = "kakan"
    ANKAN = "ankan"
    REACH = "reach"
    HORA = "hora"
    RYUKYOKU = "ryukyoku"
    NONE = "none"


class MeldType(str, Enum):
    """Open meld kinds made by calling a discard."""

    CHI = "chi"
    PON = "pon"
    DAIMINKAN = "daiminkan"


class DecisionWindow(str, Enum):
    """Which kind of decision the last applied event opened for the tracked seat."""

    NONE = "none"
    SELF_DRAW = "self_draw"  # own tsumo: discard / riichi / tsumo / kans / kyuushu
    AFTER_CALL = "after_call"  # own chi or pon: discard with kuikae
    RIICHI_DISCARD = "riichi_discard"  # own reach: tenpai-keeping discard
    DISCARD_RESPONSE = "discard_response"  # another seat discarded: ron / chi / pon / daiminkan
    KAN_RESPONSE = "kan_response"  # another seat declared a kan: chankan / four kans


class GameType(str, Enum):
    """Game length type."""

    HANCHAN = "hanchan"  # East + South
    TONPUSEN = "tonpusen"  # East only
