# File: tests/test_frontier.py
import pytest

from seo_scout.crawler.frontier import Frontier, FrontierState
from seo_scout.errors import FrontierExhausted


def drain(frontier: Frontier) -> list[str]:
    taken = []
    while (url := frontier.take()) is not None:
        frontier.mark_visited(url)
        taken.append(url)
    return taken


def test_budget_must_be_positive():
    with pytest.raises(ValueError):
        Frontier(0)


def test_seed_preserves_order_and_drops_duplicates():
    frontier = Frontier(10)
    added = frontier.seed(["https://a.com/", "https://a.com/x", "https://a.com/", "https://a.com/y"])
    assert added == 3
    assert frontier.pending == ["https://a.com/", "https://a.com/x", "https://a.com/y"]
    assert frontier.state is FrontierState.SEEDED


def test_take_is_fifo_and_moves_to_draining():
    frontier = Frontier(10)
    frontier.seed(["https://a.com/1", "https://a.com/2"])
    assert frontier.take() == "https://a.com/1"
    assert frontier.state is FrontierState.DRAINING
    assert frontier.pending == ["https://a.com/2"]


def test_budget_caps_visited():
    frontier = Frontier(5)
    frontier.seed([f"https://a.com/p{i}" for i in range(50)])
    taken = drain(frontier)
    assert taken == [f"https://a.com/p{i}" for i in range(5)]
    assert len(frontier.visited) == 5
    assert frontier.budget_left == 0
    assert frontier.exhausted


def test_visited_urls_are_never_requeued():
    frontier = Frontier(10)
    frontier.seed(["https://a.com/"])
    url = frontier.take()
    frontier.mark_visited(url)
    assert frontier.offer("https://a.com/") is False
    assert frontier.offer("https://a.com/next") is True
    assert frontier.offer("https://a.com/next") is False
    assert "https://a.com/" in frontier
    assert len(frontier) == 1


def test_pending_and_visited_are_disjoint():
    frontier = Frontier(10)
    frontier.seed(["https://a.com/1", "https://a.com/2", "https://a.com/3"])
    url = frontier.take()
    frontier.mark_visited(url)
    frontier.offer("https://a.com/4")
    assert not set(frontier.pending) & frontier.visited


def test_empty_pending_exhausts():
    frontier = Frontier(3)
    frontier.seed([])
    assert frontier.take() is None
    assert frontier.state is FrontierState.EXHAUSTED


def test_take_after_exhaustion_raises():
    frontier = Frontier(1)
    frontier.seed(["https://a.com/"])
    drain(frontier)
    with pytest.raises(FrontierExhausted):
        frontier.take()
    with pytest.raises(FrontierExhausted):
        frontier.seed(["https://a.com/other"])
    assert frontier.offer("https://a.com/other") is False
