from typing import List

from goodsong.models import TrainingLog

# Demo records for DEMO_MODE: a few members with a week or so of sessions each.
SAMPLE_TRAINING_DATA = [
    TrainingLog(timestamp="2024-05-20", name="김철수", training_type="5km", intensity=8, heart_rate=158, notes="스쿼트 100kg 성공, 컨디션 좋음", condition="Excellent"),
    TrainingLog(timestamp="2024-05-21", name="김철수", training_type="인터벌 러닝", intensity=9, heart_rate=171, notes="심박수 170 유지", condition="Good"),
    TrainingLog(timestamp="2024-05-22", name="김철수", training_type="10km", intensity=7, heart_rate=149, notes="어깨 통증 약간 있음", condition="Fair"),
    TrainingLog(timestamp="2024-05-20", name="이영희", training_type="3km", intensity=4, heart_rate=132, notes="유연성 향상 집중", condition="Excellent"),
    TrainingLog(timestamp="2024-05-23", name="이영희", training_type="5km", intensity=6, heart_rate=0, notes="워치 미착용", condition="Good"),
    TrainingLog(timestamp="2024-05-21", name="박지성", training_type="하프", intensity=10, heart_rate=165, notes="고강도 스프린트 반복", condition="Good"),
    TrainingLog(timestamp="2024-05-24", name="박지성", training_type="회복주", intensity=2, heart_rate=121, notes="가벼운 스트레칭", condition="Excellent"),
    TrainingLog(timestamp="2024-05-25", name="최민지", training_type="7km", intensity=7, heart_rate=152, notes="", condition="Good"),
    TrainingLog(timestamp="2024-05-26", name="최민지", training_type="5km", intensity=0, heart_rate=147, notes="데드리프트 자세 교정", condition="Fair"),
]


class SampleSource:
    """Bundled demo data, used instead of the sheet when DEMO_MODE is on."""

    label = "Sample data"

    async def load(self) -> List[TrainingLog]:
        return list(SAMPLE_TRAINING_DATA)
