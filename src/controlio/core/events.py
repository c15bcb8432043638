"""Well-known event type constants.

Defined centrally so publishers and subscribers reference the same strings.
"""

# --- Input events (hardware / broker → system) ---------------------------

BUTTON_EDGE = "input.button.edge"
MESSAGE_RECEIVED = "input.message.received"

# --- Command events (button machines / schedule → router) ----------------

COMMAND_ISSUED = "control.command.issued"
