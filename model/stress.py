"""
model/stress.py — Colour → stress category table
==================================================

⚠️  DISCLAIMER: This is a playful WELLNESS INDICATOR, not a measurement.
    The confirmed colour is mapped to a fixed record; nothing is inferred
    from the user's physiology.

Each confirmed `ColorLabel` keys one `CategoryRecord`:

    Red     → 9.2   high stress       (scale marker at 90 %)
    Yellow  → 6.5   moderate stress   (65 %)
    Green   → 4.2   balanced          (35 %)
    Blue    → 2.5   deep calm         (15 %)

The table is plain data.  Callers may inject their own mapping wherever a
`table` argument is accepted.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from vision.classifier import ColorLabel
from utils.logger import get_logger

logger = get_logger("model.stress")


@dataclass(frozen=True)
class CategoryRecord:
    """Display record for one confirmed colour."""
    level: str                  # Severity score as shown to the user
    explanation: str
    advice: tuple[str, ...]     # One bullet per entry
    scale_position: int         # Marker position on the 0–100 % scale


STRESS_CATEGORIES: Mapping[ColorLabel, CategoryRecord] = MappingProxyType({
    ColorLabel.RED: CategoryRecord(
        level="9.2",
        explanation=(
            "ระดับความเครียดสูงมาก (High Stress Detected) "
            "พบคลื่นความพี่สีแดงที่บ่งบอกถึงความกดดันอย่างรุนแรง"
        ),
        advice=(
            "หยุดพักทันที 15-20 นาที",
            "ทำสมาธิหรือฝึกลมหายใจช้าๆ",
            "ดื่มน้ำเปล่าเพื่อปรับสมดุล",
            "หลีกเลี่ยงหน้าจอหรืองานเร่งด่วน",
        ),
        scale_position=90,
    ),
    ColorLabel.YELLOW: CategoryRecord(
        level="6.5",
        explanation=(
            "ความเครียดสะสมปานกลาง (Moderate Stress) "
            "พลังงานมีความแปรปรวนแต่ยังควบคุมได้"
        ),
        advice=(
            "พักสายตา 5-10 นาที",
            "ยืดเหยียดร่างกายเบาๆ",
            "ฟังเพลงผ่อนคลาย",
            "หาถั่วหรือผลไม้ทานเล่น",
        ),
        scale_position=65,
    ),
    ColorLabel.GREEN: CategoryRecord(
        level="4.2",
        explanation=(
            "ร่างกายอยู่ในภาวะสมดุล (Balanced State) "
            "ระบบประสาทผ่อนคลายและพร้อมทำงาน"
        ),
        advice=(
            "รักษาสภาพแวดล้อมปัจจุบันไว้",
            "ทำงานที่ใช้สมาธิต่อได้ดี",
            "ยิ้มรับความสดชื่น",
        ),
        scale_position=35,
    ),
    ColorLabel.BLUE: CategoryRecord(
        level="2.5",
        explanation=(
            "ภาวะสงบนิ่งเป็นพิเศษ (Deep Calm) "
            "สภาวะจิตใจแจ่มใสและมั่นคงมาก"
        ),
        advice=(
            "เหมาะสำหรับการวางแผนระยะยาว",
            "แบ่งปันพลังงานบวกให้คนรอบข้าง",
            "จดบันทึกไอเดียดีๆ ที่เกิดขึ้น",
        ),
        scale_position=15,
    ),
})


def lookup_category(
    label: ColorLabel,
    table: Mapping[ColorLabel, CategoryRecord] = STRESS_CATEGORIES,
) -> CategoryRecord:
    """
    Fetch the record for a confirmed colour.

    Raises
    ------
    KeyError
        If `label` has no entry in `table`.
    """
    try:
        record = table[label]
    except KeyError:
        logger.error("No category record for label %r.", label)
        raise
    logger.info("Category for %s: level=%s, scale=%d%%", label.value, record.level, record.scale_position)
    return record


def format_advice(record: CategoryRecord, bullet: str = "•") -> list[str]:
    """Advice lines ready for rendering, one bullet each."""
    return [f"{bullet} {line}" for line in record.advice]
