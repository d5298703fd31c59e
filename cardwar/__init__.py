"""
cardwar: the War card game as pure finite-state machines.

The game and player engines are pure `(model, message) -> (model, command)`
functions; `cardwar.engine` hosts them as asyncio actors.
"""
