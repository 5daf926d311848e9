"""Qt-facing application facade and state objects.

- Commands enter through ``EditController`` (start, cancel, reset, ...)
- Widgets bind to the state QObjects (controller.session_state / controller.settings_state)
- All session mutation happens on the GUI thread; edits run on ``EditWorker`` threads
"""
