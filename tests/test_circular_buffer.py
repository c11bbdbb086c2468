"""Tests for the circular card buffer."""

import pytest

from wandcraft.circular_buffer import CircularBuffer, BufferFullError


class TestCircularBuffer:
    """Push / pop / wrap-around behavior."""

    @pytest.fixture
    def buffer(self):
        return CircularBuffer(4)

    def test_starts_empty(self, buffer):
        assert buffer.used == 0
        assert len(buffer) == 0
        assert buffer.capacity == 4
        assert buffer.try_pop_first() is None

    def test_fifo_order(self, buffer):
        buffer.push_many(['a', 'b', 'c'])

        assert buffer.try_pop_first() == 'a'
        assert buffer.try_pop_first() == 'b'
        assert buffer.used == 1
        assert buffer.to_array() == ['c']

    def test_push_on_full_raises_and_keeps_contents(self, buffer):
        buffer.push_many([1, 2, 3, 4])

        with pytest.raises(BufferFullError):
            buffer.push(5)

        assert buffer.to_array() == [1, 2, 3, 4]

    def test_wraps_around_the_end(self, buffer):
        buffer.push_many([1, 2, 3])
        buffer.try_pop_first()
        buffer.try_pop_first()
        buffer.push_many([4, 5, 6])  # Uses the freed front slots

        assert buffer.is_full()
        assert buffer.to_array() == [3, 4, 5, 6]
        assert [buffer.try_pop_first() for _ in range(4)] == [3, 4, 5, 6]
        assert buffer.try_pop_first() is None

    def test_clear(self, buffer):
        buffer.push_many([1, 2, 3])
        buffer.clear()

        assert buffer.used == 0
        assert buffer.to_array() == []
        buffer.push_many([7, 8, 9, 10])
        assert buffer.to_array() == [7, 8, 9, 10]

    def test_to_array_is_a_snapshot(self, buffer):
        buffer.push_many([1, 2])
        snapshot = buffer.to_array()
        buffer.push(3)

        assert snapshot == [1, 2]

    def test_push_contents_into(self, buffer):
        other = CircularBuffer(4)
        other.push('x')
        buffer.push_many(['a', 'b'])

        buffer.push_contents_into(other)

        assert other.to_array() == ['x', 'a', 'b']
        assert buffer.used == 0

    def test_zero_capacity(self):
        empty = CircularBuffer(0)

        assert empty.try_pop_first() is None
        with pytest.raises(BufferFullError):
            empty.push('a')

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            CircularBuffer(-1)
