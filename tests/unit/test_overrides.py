"""
覆盖预处理单元测试
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from player_core.config import OverridesConfig, PlayerConfig
from player_core.preprocessing import (
    BasePreProcessor,
    MAX_WAIT_OVERRIDE_THRESHOLD,
    OVERRIDE_THRESHOLD,
    OverridesPreProcessor,
    PreProcessingPipeline,
    TruncationsPreProcessor,
    override_timing,
    override_truncation,
)
from player_core.schema.models import (
    EventSubType,
    MouseOffsets,
    RecordedTest,
    ReplayEvent,
    Timings,
    Truncations,
)


class Recorder:
    """记录setter调用"""

    def __init__(self):
        self.values = []

    def __call__(self, value):
        self.values.append(value)


def make_test(**kwargs) -> RecordedTest:
    return RecordedTest(name="override", **kwargs)


def make_overrides(**groups) -> OverridesConfig:
    return OverridesConfig.model_validate(groups)


class TestOverrideTiming:
    """测试单个时序覆盖"""

    def test_slowdown_rejected(self):
        """测试不允许放慢时, 比录制更大的最大等待被拒绝"""
        setter = Recorder()
        assert not override_timing(MAX_WAIT_OVERRIDE_THRESHOLD, 500, 200, setter, False)
        assert setter.values == []

    def test_unset_recorded_value_accepts(self):
        """测试录制未设置最大等待时接受覆盖"""
        setter = Recorder()
        assert override_timing(MAX_WAIT_OVERRIDE_THRESHOLD, 500, -1, setter, False)
        assert setter.values == [500]

    def test_speedup_accepted(self):
        """测试更小的最大等待被接受"""
        setter = Recorder()
        assert override_timing(MAX_WAIT_OVERRIDE_THRESHOLD, 100, 200, setter, False)
        assert setter.values == [100]

    def test_equal_value_rejected(self):
        """测试相同值不覆盖"""
        setter = Recorder()
        assert not override_timing(MAX_WAIT_OVERRIDE_THRESHOLD, 200, 200, setter, False)

    def test_threshold(self):
        """测试不超过阈值的值被忽略"""
        setter = Recorder()
        assert not override_timing(MAX_WAIT_OVERRIDE_THRESHOLD, -2, -1, setter, False)
        assert not override_timing(OVERRIDE_THRESHOLD, -1, 300, setter, True)
        assert setter.values == []

    def test_allow_slowdown(self):
        """测试允许放慢时总是覆盖"""
        setter = Recorder()
        assert override_timing(OVERRIDE_THRESHOLD, 5000, 300, setter, True)
        assert override_timing(OVERRIDE_THRESHOLD, 0, 300, setter, True)
        assert setter.values == [5000, 0]


class TestOverrideTruncation:
    """测试截断覆盖"""

    def test_applied(self):
        """测试大于阈值的值被应用"""
        setter = Recorder()
        assert override_truncation(OVERRIDE_THRESHOLD, 5, setter)
        assert override_truncation(OVERRIDE_THRESHOLD, 0, setter)
        assert setter.values == [5, 0]

    def test_unset(self):
        """测试-1不覆盖"""
        setter = Recorder()
        assert not override_truncation(OVERRIDE_THRESHOLD, -1, setter)
        assert setter.values == []


class TestOverridesPreProcessor:
    """测试覆盖预处理器"""

    def test_reproduction_narrows_mask(self):
        """测试回放模式只能关闭事件类型"""
        test = make_test(preferred_play_mode=0b0111)
        processor = OverridesPreProcessor(make_overrides(reproduction={"enabled": True, "mode": 0b0101}))
        assert processor.pre_process(test)
        assert test.preferred_play_mode == 0b0101

        test = make_test(preferred_play_mode=0b0111)
        OverridesPreProcessor(make_overrides(reproduction={"enabled": True, "mode": 0b1000})).pre_process(test)
        assert test.preferred_play_mode == 0

    def test_reproduction_ignored(self):
        """测试未开启或掩码为0时不覆盖"""
        test = make_test(preferred_play_mode=0b0111)
        OverridesPreProcessor(make_overrides(reproduction={"enabled": True, "mode": 0})).pre_process(test)
        OverridesPreProcessor(make_overrides(reproduction={"enabled": False, "mode": 1})).pre_process(test)
        assert test.preferred_play_mode == 0b0111

    def test_timings(self):
        """测试时序覆盖"""
        test = make_test(timings=Timings(max_wait_ns=200))
        processor = OverridesPreProcessor(make_overrides(timings={
            "enabled": True,
            "start_delay_ms": 0,
            "sc_delay_ms": 500,
            "min_wait_ns": -1,
            "min_wait_floor_ms": 2,
            "max_wait_ns": 500,
        }))
        processor.pre_process(test)

        assert test.timings.start_delay_ms == 0
        assert test.timings.sc_delay_ms == 500
        assert test.timings.min_wait_ns == 1_000_000  # -1 不覆盖
        assert test.timings.min_wait_floor_ms == 2
        assert test.timings.max_wait_ns == 200  # 不允许放慢

    def test_timings_unlimited_ceiling_accepts(self):
        """测试录制不限最大等待时接受覆盖"""
        test = make_test()
        OverridesPreProcessor(make_overrides(timings={"enabled": True, "max_wait_ns": 500})).pre_process(test)
        assert test.timings.max_wait_ns == 500

    def test_truncations(self):
        """测试每个截断字段独立覆盖"""
        test = make_test(truncations=Truncations(mouse_start=1, mouse_end=2, kb_start=3, kb_end=4))
        processor = OverridesPreProcessor(make_overrides(truncations={
            "enabled": True,
            "mouse_start": 5,
            "mouse_end": -1,
            "kb_start": 0,
        }))
        processor.pre_process(test)
        assert test.truncations == Truncations(mouse_start=5, mouse_end=2, kb_start=0, kb_end=4)

    def test_mouse_offsets_replaced(self):
        """测试鼠标偏移直接替换"""
        test = make_test(mouse_offsets=MouseOffsets(x=7, y=7))
        OverridesPreProcessor(make_overrides(mouse_offsets={"enabled": True, "x": 0, "y": -3})).pre_process(test)
        assert test.mouse_offsets == MouseOffsets(x=0, y=-3)

    def test_disabled_groups(self):
        """测试未开启的分组不修改测试"""
        test = make_test(timings=Timings(max_wait_ns=200), mouse_offsets=MouseOffsets(x=1, y=1))
        before = test.model_copy(deep=True)
        processor = OverridesPreProcessor(make_overrides(
            timings={"enabled": False, "start_delay_ms": 0},
            truncations={"enabled": False, "kb_end": 9},
            mouse_offsets={"enabled": False, "x": 5, "y": 5},
        ))
        processor.pre_process(test)
        assert test == before

    def test_idempotent(self):
        """测试相同配置重复执行结果不变"""
        overrides = make_overrides(
            reproduction={"enabled": True, "mode": 0b10110},
            timings={"enabled": True, "start_delay_ms": 10, "max_wait_ns": 100},
            truncations={"enabled": True, "mouse_start": 2},
            mouse_offsets={"enabled": True, "x": 3, "y": 4},
        )
        processor = OverridesPreProcessor(overrides)
        test = make_test(timings=Timings(max_wait_ns=300))
        processor.pre_process(test)
        once = test.model_copy(deep=True)
        processor.pre_process(test)
        assert test == once
        assert test.timings.max_wait_ns == 100


class DecliningPreProcessor(BasePreProcessor):
    """总是拒绝的预处理器"""

    name = "decline"
    priority = 35

    def __init__(self):
        self.calls = 0

    def pre_process(self, test: RecordedTest) -> bool:
        self.calls += 1
        return False


class TestPreProcessingPipeline:
    """测试预处理流水线"""

    def test_default_chain(self):
        """测试默认流水线顺序"""
        pipeline = PreProcessingPipeline.from_config(PlayerConfig())
        assert [p.name for p in pipeline.processors] == ["overrides", "truncations"]

    def test_priority_order(self):
        """测试按优先级排序"""
        pipeline = PreProcessingPipeline([TruncationsPreProcessor(), OverridesPreProcessor(OverridesConfig())])
        assert [p.priority for p in pipeline.processors] == [30, 40]

    def test_truncation_uses_overridden_bounds(self):
        """测试截断使用覆盖后的值"""
        keys = [ReplayEvent(timestamp=i, sub_type=EventSubType.KEYBOARD) for i in range(5)]
        test = make_test(keyboard_events=keys)
        config = PlayerConfig(overrides=make_overrides(truncations={"enabled": True, "kb_start": 1, "kb_end": 2}))

        assert PreProcessingPipeline.from_config(config).run(test)
        assert [e.timestamp for e in test.keyboard_events] == [1, 2]

    def test_declined_stops_chain(self):
        """测试预处理器拒绝后停止"""
        keys = [ReplayEvent(timestamp=i, sub_type=EventSubType.KEYBOARD) for i in range(5)]
        test = make_test(keyboard_events=keys, truncations=Truncations(kb_start=2))
        declining = DecliningPreProcessor()
        pipeline = PreProcessingPipeline.from_config(PlayerConfig())
        pipeline.register(declining)

        assert not pipeline.run(test)
        assert declining.calls == 1
        assert len(test.keyboard_events) == 5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
