"""
Telegram-specific FSM state definitions using aiogram's StatesGroup.

Only Telegram handlers import from this module; core logic never does.
"""

from aiogram.fsm.state import State, StatesGroup


class TankBrowsing(StatesGroup):
    """
    States for browsing tanks and updating their progress.

    Flow: level → tank → (sub-tank) → stages → (confirm undo)

    FSM data keys used:
      level          — Level value of the selected level
      tank_id        — selected tank
      sub_index      — selected sub-tank of a grouped tank (None otherwise)
      pending_stage  — stage waiting for undo confirmation
    """

    selecting_level = State()
    selecting_tank = State()
    selecting_sub_tank = State()
    viewing_stages = State()
    confirming_undo = State()
