"""测试中断登记表"""

from jura.agent.interrupts import InterruptRegistry


class TestInterruptRegistry:

    def setup_method(self):
        self.registry = InterruptRegistry()

    def test_interrupt_without_stream_is_noop(self):
        assert self.registry.interrupt("conv-1") is False
        assert self.registry.is_interrupted("conv-1") is False

    def test_interrupt_active_stream(self):
        self.registry.register("conv-1", "msg-1")
        assert self.registry.is_active("conv-1")

        assert self.registry.interrupt("conv-1") is True
        assert self.registry.is_interrupted("conv-1") is True

    def test_unregister_only_removes_matching_message(self):
        self.registry.register("conv-1", "msg-1")
        self.registry.register("conv-1", "msg-2")

        self.registry.unregister("conv-1", "msg-1")
        assert self.registry.is_active("conv-1")

        self.registry.unregister("conv-1", "msg-2")
        assert not self.registry.is_active("conv-1")

    def test_new_stream_resets_interrupt_flag(self):
        self.registry.register("conv-1", "msg-1")
        self.registry.interrupt("conv-1")

        self.registry.register("conv-1", "msg-2")
        assert self.registry.is_interrupted("conv-1") is False

    def test_streams_are_isolated_per_conversation(self):
        self.registry.register("conv-1", "msg-1")
        self.registry.register("conv-2", "msg-2")
        self.registry.interrupt("conv-1")
        assert self.registry.is_interrupted("conv-2") is False
