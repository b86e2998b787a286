"""
Tests for the background expiry sweeper.
"""
import asyncio

from quicklink_app.hit_processor.expiry_sweeper import ExpirySweeper


class FlakyStore:
    """Store stub whose first sweep blows up"""
    
    def __init__(self):
        self.calls = 0
    
    def sweep_expired(self) -> int:
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("boom")
        return 1


class TestExpirySweeper:
    """Test sweeping on demand and on a schedule"""
    
    def test_run_once_sweeps_store(self, store, clock):
        store.create("abc123", "https://x.com", 5)
        clock.advance(minutes=6)
        sweeper = ExpirySweeper(store)
        
        assert sweeper.run_once() == 1
        assert sweeper.removed_count == 1
        assert store.get_with_events("abc123") is None
    
    def test_failure_is_contained(self):
        sweeper = ExpirySweeper(FlakyStore())
        
        assert sweeper.run_once() == 0
        assert sweeper.run_once() == 1
        assert sweeper.sweep_count == 1
    
    def test_schedule_survives_failures_and_stops(self):
        store = FlakyStore()
        sweeper = ExpirySweeper(store, interval_seconds=0.01)
        
        async def scenario():
            sweeper.start()
            await asyncio.sleep(0.2)
            await sweeper.stop()
            calls_at_stop = store.calls
            await asyncio.sleep(0.05)
            return calls_at_stop
        
        calls_at_stop = asyncio.run(scenario())
        
        assert calls_at_stop >= 2
        assert store.calls == calls_at_stop
        assert sweeper.running is False
    
    def test_stop_without_start(self, store):
        asyncio.run(ExpirySweeper(store).stop())
