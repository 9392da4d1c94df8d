"""Off-process solving with a single completion message per job.

Messages are plain dicts so they cross process boundaries and serialize
straight to JSON::

    {"type": "DONE",  "results": [BuildResult, ...]}   # model_dump(mode="json")
    {"type": "ERROR", "message": "human readable"}
"""
import logging
import multiprocessing as mp
import threading
from collections.abc import Callable
from concurrent.futures import Future, InvalidStateError
from dataclasses import dataclass
from multiprocessing.connection import Connection
from typing import Any

from pydantic import ValidationError

from relicplanner.config import SolverSettings
from relicplanner.constants import MSG_DONE, MSG_ERROR
from relicplanner.data import get_game_data
from relicplanner.errors import SolverError
from relicplanner.models import SolveRequest
from relicplanner.solver import RelicSolver

logger = logging.getLogger(__name__)

Message = dict[str, Any]


def done_message(results: list) -> Message:
    return {"type": MSG_DONE, "results": [r.model_dump(mode="json") for r in results]}


def error_message(message: str) -> Message:
    return {"type": MSG_ERROR, "message": message}


def solve_payload(payload: dict, settings_data: dict | None = None) -> Message:
    """Validate, solve and wrap the outcome. Never raises.

    A ``character`` key names a doll from the bundled reference data; its
    slot layout and equipped filter then apply to the solve.
    """
    character = payload.get("character")
    if character is not None:
        gd = get_game_data()
        doll = gd.get_doll(character)
        if doll is None:
            logger.warning("Rejected solve request: unknown character %r", character)
            return error_message(
                f"Unknown character '{character}'. Valid names: {gd.get_doll_names()}")
        payload = {**payload, "doll": doll}

    try:
        settings = SolverSettings(**settings_data) if settings_data else None
        request = SolveRequest.model_validate(payload)
        results = RelicSolver.from_request(request, settings).solve()
    except ValidationError as e:
        logger.warning("Rejected solve request: %s", e)
        return error_message(f"Invalid request: {e}")
    except SolverError as e:
        logger.exception("Solve failed")
        return error_message(str(e))
    except Exception as e:
        logger.exception("Unexpected solver fault")
        return error_message(f"Optimization failed: {e}")
    return done_message(results)


def _run_job(conn: Connection, payload: dict, settings_data: dict | None) -> None:
    try:
        conn.send(solve_payload(payload, settings_data))
    finally:
        conn.close()


@dataclass
class _Job:
    generation: int
    process: mp.Process
    future: Future
    collector: threading.Thread


class SolverWorker:
    """Runs one solve at a time, each in its own process.

    A new submit() supersedes the previous job: its process is terminated and
    its message is dropped, so results of an abandoned run never reach
    ``on_complete``.
    """

    def __init__(self, on_complete: Callable[[Message], None] | None = None,
                 settings: SolverSettings | None = None):
        self.on_complete = on_complete
        self._settings_data = settings.model_dump() if settings is not None else None
        self._current: _Job | None = None
        self._generation = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def submit(self, payload: dict) -> Future:
        self.cancel()
        self._generation += 1
        generation = self._generation

        receiver, sender = mp.Pipe(duplex=False)
        process = mp.Process(target=_run_job, args=(sender, payload, self._settings_data),
                             daemon=True)
        process.start()
        sender.close()  # only the child writes

        future: Future = Future()
        future.add_done_callback(lambda f: self._deliver(generation, f))
        collector = threading.Thread(target=self._collect,
                                     args=(process, receiver, future), daemon=True)
        collector.start()
        self._current = _Job(generation, process, future, collector)
        return future

    def wait(self, timeout: float | None = None) -> Message | None:
        """Block for the current job's message; None when nothing was submitted."""
        if self._current is None:
            return None
        return self._current.future.result(timeout=timeout)

    def cancel(self) -> None:
        """Abandon the current job, if any, and terminate its process."""
        job = self._current
        if job is None:
            return
        self._current = None
        if not job.future.done():
            self._generation += 1
            job.future.cancel()
        if job.process.is_alive():
            logger.debug("Terminating superseded job %d", job.generation)
            job.process.terminate()
        job.process.join()
        if job.collector is not threading.current_thread():
            job.collector.join()

    def close(self) -> None:
        self.cancel()

    def __enter__(self) -> "SolverWorker":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _collect(process: mp.Process, receiver: Connection, future: Future) -> None:
        try:
            message = receiver.recv()
        except EOFError:
            process.join()
            message = error_message(
                f"Solver worker exited without a result (exit code {process.exitcode})")
        finally:
            receiver.close()
        process.join()
        try:
            future.set_result(message)
        except InvalidStateError:
            logger.debug("Job cancelled before its message arrived")

    def _deliver(self, generation: int, future: Future) -> None:
        if future.cancelled() or generation != self._generation:
            logger.debug("Dropping result of superseded job %d", generation)
            return
        if self.on_complete is not None:
            self.on_complete(future.result())
