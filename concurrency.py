"""
Forklet spawn/sync support
Each spawned expression runs on its own pykka actor thread and publishes
its outcome through a write-once FutureCell, the only state shared
between the spawning context and the task
"""

from typing import Any, Callable, Dict, Optional
import sys
import threading
import uuid

import pykka

from error_handling import ForkletTypeError, FutureAlreadyConsumedError
from values import FUTURE, value_type


EMPTY = "empty"
POPULATED = "populated"
CONSUMED = "consumed"

# Task threads nest as deeply as the spawning thread may
TASK_STACK_SIZE = 32 * 1024 * 1024


# ============================================================================
# FUTURE CELL
# ============================================================================

class FutureCell:
  """Write-once, single-consumer result slot

  empty -> populated happens once, when the task commits a value or a
  failure; the first claim moves the cell to consumed. Waiting on a cell
  whose task never finishes blocks forever.
  """

  def __init__(self, task_id: Optional[str] = None):
    self.task_id = task_id
    self._lock = threading.Lock()
    self._future = pykka.ThreadingFuture()
    self._populated = False
    self._consumed = False

  @property
  def state(self) -> str:
    with self._lock:
      if self._consumed:
        return CONSUMED
      return POPULATED if self._populated else EMPTY

  def commit(self, value: Dict) -> None:
    """Publish the task's value"""
    with self._lock:
      self._mark_populated()
      self._future.set(value)

  def commit_failure(self, exc_info) -> None:
    """Publish the task's failure so the consumer re-raises it"""
    with self._lock:
      self._mark_populated()
      self._future.set_exception(exc_info)

  def _mark_populated(self) -> None:
    if self._populated:
      raise RuntimeError(f"future for task {self.task_id} already populated")
    self._populated = True

  def claim(self) -> Dict:
    """Take the value, blocking until the task has committed

    Raises FutureAlreadyConsumedError on every claim after the first, and
    re-raises the task's own exception if it failed.
    """
    with self._lock:
      if self._consumed:
        raise FutureAlreadyConsumedError(self.task_id)
      self._consumed = True
    return self._future.get()

  def __repr__(self) -> str:
    return f"FutureCell(task_id={self.task_id!r}, state={self.state!r})"


# ============================================================================
# TASK ACTOR (Using Pykka)
# ============================================================================

class SpawnedTask(pykka.ThreadingActor):
  """Actor that evaluates one spawned expression and then stops"""

  use_daemon_thread = True

  def __init__(self, task_id: str, cell: FutureCell, work: Callable[[], Dict],
               debug: bool = False):
    super().__init__()
    self.task_id = task_id
    self.cell = cell
    self.work = work
    self.debug = debug

  def on_receive(self, message):
    if message.get('command') != 'run':
      return None
    try:
      value = self.work()
    except Exception as e:
      if self.debug:
        print(f"[task {self.task_id}] failed: {e}")
      self.cell.commit_failure(sys.exc_info())
    else:
      if self.debug:
        print(f"[task {self.task_id}] committed")
      self.cell.commit(value)
    finally:
      self.actor_ref.stop(block=False)
    return None


def new_task_id() -> str:
  return uuid.uuid4().hex[:8]


def spawn_task(work: Callable[[], Dict], debug: bool = False,
               task_id: Optional[str] = None) -> FutureCell:
  """Start work on a detached actor thread and return its empty cell at once"""
  if threading.stack_size() < TASK_STACK_SIZE:
    threading.stack_size(TASK_STACK_SIZE)
  task_id = task_id or new_task_id()
  cell = FutureCell(task_id)
  actor_ref = SpawnedTask.start(task_id, cell, work, debug)
  if debug:
    print(f"Spawned task {task_id}")
  actor_ref.tell({'command': 'run'})
  return cell


def sync_future(future: Dict) -> Dict:
  """Block on a Future value and return what its task computed"""
  if value_type(future) != FUTURE:
    raise ForkletTypeError("cannot sync non-future value", function="sync",
                           expected=FUTURE, got=value_type(future))
  return future['value'].claim()


def stop_all_tasks(block: bool = True, timeout: Optional[float] = None) -> Any:
  """Stop every task actor still registered"""
  return pykka.ActorRegistry.stop_all(block=block, timeout=timeout)
