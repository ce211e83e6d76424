from focusflow.timer.events import Command, CommandType
from focusflow.timer.engine import TimerEngine
from focusflow.timer.driver import TickDriver

__all__ = ["Command", "CommandType", "TimerEngine", "TickDriver"]
