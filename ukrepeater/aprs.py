"""
APRS-IS passcode generation

The passcode is the classic 0x73E2 XOR hash over the uppercased callsign,
as used by aprs.fi, Direwolf and Magicbug.
"""

from typing import Optional

MAX_CALLSIGN_LENGTH = 10
PASSCODE_SEED = 0x73E2


def aprs_passcode(callsign: str) -> Optional[int]:
    """Generate the APRS-IS passcode for a callsign.

    Args:
        callsign: Callsign to hash, any case.

    Returns:
        Optional[int]: The passcode, or None if the callsign is longer than
            10 characters.
    """
    if len(callsign) > MAX_CALLSIGN_LENGTH:
        return None

    callsign = callsign.upper()
    code = PASSCODE_SEED
    for i in range(0, len(callsign), 2):
        code ^= ord(callsign[i]) << 8
        if i + 1 < len(callsign):
            code ^= ord(callsign[i + 1])
    return code & 0x7FFF


def format_passcode_reply(callsign: str) -> str:
    """Reply text for an APRS passcode request, empty if no passcode can be made"""
    code = aprs_passcode(callsign)
    if code is None:
        return ""
    return f"Your APRS password is: {code}"
