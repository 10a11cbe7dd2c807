import threading
import unittest
from unittest.mock import patch

from refresher import DashboardRefresher, QueryPoller
from helpers import FakeResponse, FakeSession, make_settings, raise_connection_error


class BlockingSession(FakeSession):
    """Holds every request until release() is called."""

    def __init__(self, routes):
        super().__init__(routes)
        self.gate = threading.Event()

    def get(self, url, headers=None, timeout=None):
        self.gate.wait(5)
        return super().get(url, headers=headers, timeout=timeout)

    def release(self):
        self.gate.set()


class TestQueryPoller(unittest.TestCase):
    def setUp(self):
        self.results = []
        self.url = "http://dashboard.test/api/stats"

    def record(self, name, payload):
        self.results.append((name, payload))

    def test_tick_coalesced_while_fetch_in_flight(self):
        session = BlockingSession({self.url: {"productivity": {"score": 40}}})
        poller = QueryPoller("stats", self.url, self.record, session)

        self.assertTrue(poller.tick())
        self.assertTrue(poller.busy)
        self.assertFalse(poller.tick())

        session.release()
        poller.wait(5)

        self.assertFalse(poller.busy)
        self.assertEqual(len(session.calls), 1)
        self.assertEqual(self.results, [("stats", {"productivity": {"score": 40}})])

        self.assertTrue(poller.tick())
        poller.wait(5)
        self.assertEqual(len(session.calls), 2)

    def test_failure_reports_unavailable(self):
        session = FakeSession({self.url: FakeResponse(500, {"detail": "Failed"})})
        poller = QueryPoller("stats", self.url, self.record, session)

        self.assertIsNone(poller.fetch())

        session.routes[self.url] = raise_connection_error()
        self.assertIsNone(poller.fetch())


class TestDashboardRefresher(unittest.TestCase):
    def test_polls_every_query_from_base_url(self):
        results = {}
        session = FakeSession({
            "http://dashboard.test/api/stats": {"productivity": {"score": 10}},
            "http://dashboard.test/api/todoist/overview": {"overdue_count": 1},
            "http://dashboard.test/api/github/activity": {"total_commits": 3},
        })
        refresher = DashboardRefresher(
            make_settings(), lambda name, payload: results.update({name: payload}), session=session
        )

        refresher.run_once()

        self.assertEqual(results, {
            "tasks": {"overdue_count": 1},
            "activity": {"total_commits": 3},
            "stats": {"productivity": {"score": 10}},
        })

    def test_selected_queries_only(self):
        refresher = DashboardRefresher(make_settings(), lambda name, payload: None, queries=["stats"])

        self.assertEqual([p.url for p in refresher.pollers], ["http://dashboard.test/api/stats"])

    def test_run_stops_when_event_set(self):
        calls = []
        session = FakeSession({"http://dashboard.test/api/stats": {}})
        stop = threading.Event()

        def on_result(name, payload):
            calls.append(name)
            stop.set()

        refresher = DashboardRefresher(make_settings(), on_result, queries=["stats"], session=session)
        worker = threading.Thread(target=refresher.run, args=(stop,))
        worker.start()
        worker.join(5)

        self.assertFalse(worker.is_alive())
        self.assertEqual(calls, ["stats"])

    def test_close_releases_owned_session_only(self):
        owned = FakeSession({})
        with patch("refresher.requests.Session", return_value=owned):
            refresher = DashboardRefresher(make_settings(), lambda name, payload: None)
        self.assertTrue(all(p.session is owned for p in refresher.pollers))
        refresher.close()
        self.assertTrue(owned.closed)

        injected = FakeSession({})
        DashboardRefresher(make_settings(), lambda name, payload: None, session=injected).close()
        self.assertFalse(injected.closed)


if __name__ == "__main__":
    unittest.main(verbosity=2)
