"""Tests for the tick scheduler."""

from wandcraft.actions import shoot_wand, despawn_entity, on_despawn, debug_log
from wandcraft.scheduler import TickScheduler


class TestTickScheduler:

    def test_nothing_due_before_tick(self):
        scheduler = TickScheduler()
        scheduler.schedule(5, 'late')

        assert scheduler.pop_due(4) == []
        assert scheduler.pop_due(5) == ['late']
        assert len(scheduler) == 0

    def test_same_tick_in_schedule_order(self):
        scheduler = TickScheduler()
        scheduler.schedule(3, 'first')
        scheduler.schedule(1, 'earlier')
        scheduler.schedule(3, 'second')
        scheduler.schedule(3, 'third')

        assert scheduler.pop_due(3) == ['earlier', 'first', 'second', 'third']

    def test_overdue_tasks_still_delivered(self):
        scheduler = TickScheduler()
        scheduler.schedule(2, 'overdue')

        assert scheduler.pop_due(10) == ['overdue']

    def test_next_tick_and_pending(self):
        scheduler = TickScheduler()
        assert scheduler.next_tick() is None

        scheduler.schedule(9, shoot_wand(1))
        scheduler.schedule(4, despawn_entity(2))

        assert scheduler.next_tick() == 4
        assert scheduler.pending() == [(4, despawn_entity(2)), (9, shoot_wand(1))]

    def test_trigger_event_releases_waiting_tasks_once(self):
        scheduler = TickScheduler()
        scheduler.schedule_on(on_despawn(7), debug_log('one'))
        scheduler.schedule_on(on_despawn(7), debug_log('two'))
        scheduler.schedule_on(on_despawn(8), debug_log('other'))

        assert scheduler.trigger_event(on_despawn(7)) == [debug_log('one'), debug_log('two')]
        assert scheduler.trigger_event(on_despawn(7)) == []
        assert scheduler.trigger_event(on_despawn(8)) == [debug_log('other')]
