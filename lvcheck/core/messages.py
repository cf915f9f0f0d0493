"""Display text for calculator warning codes.

The calculator only emits :class:`CalculationWarning` members; turning them into
something a person reads happens here, per language.
"""

from typing import Dict, Iterable, List, Optional

from lvcheck.risk.leverage_calculator import CalculationWarning

DEFAULT_LANGUAGE = "en"

TRANSLATIONS: Dict[str, Dict[CalculationWarning, str]] = {
    "en": {
        CalculationWarning.STOP_EQUALS_ENTRY: "Stop price must differ from the entry price.",
        CalculationWarning.INVALID_STOP: "Stop price resolves to the entry price.",
        CalculationWarning.PERCENT_POSITION: "Loss as % of margin is only available in margin mode.",
        CalculationWarning.INVALID_MARGIN: "Enter a valid margin amount.",
        CalculationWarning.INVALID_LOSS: "Enter an allowed loss amount or percentage.",
        CalculationWarning.INVALID_POSITION: "Enter a valid total position size.",
        CalculationWarning.POSITION_TOO_LARGE: "At this stop distance the position loses more than the allowed loss.",
        CalculationWarning.TAKE_PROFIT: "Take-profit must be on the profitable side of the entry price.",
    },
    "ko": {
        CalculationWarning.STOP_EQUALS_ENTRY: "손절가와 진입가는 달라야 합니다.",
        CalculationWarning.INVALID_STOP: "손절가가 진입가와 동일합니다.",
        CalculationWarning.PERCENT_POSITION: "손실률(% of 증거금)은 증거금 모드에서만 사용 가능합니다.",
        CalculationWarning.INVALID_MARGIN: "유효한 증거금을 입력하세요.",
        CalculationWarning.INVALID_LOSS: "허용 손실 금액 또는 손실률을 입력하세요.",
        CalculationWarning.INVALID_POSITION: "유효한 총 포지션 규모를 입력하세요.",
        CalculationWarning.POSITION_TOO_LARGE: "현재 포지션과 손절 거리로는 허용 손실 금액을 초과합니다.",
        CalculationWarning.TAKE_PROFIT: "익절가는 진입가보다 유리한 방향으로 설정해야 합니다.",
    },
}

SUPPORTED_LANGUAGES = tuple(TRANSLATIONS)


def resolve_language(language: Optional[str]) -> str:
    clean = (language or "").strip().lower()
    return clean if clean in TRANSLATIONS else DEFAULT_LANGUAGE


def warning_message(code: CalculationWarning, language: Optional[str] = None) -> str:
    return TRANSLATIONS[resolve_language(language)][CalculationWarning(code)]


def translate_warnings(codes: Iterable[CalculationWarning], language: Optional[str] = None) -> List[str]:
    lang = resolve_language(language)
    return [warning_message(code, lang) for code in codes]
