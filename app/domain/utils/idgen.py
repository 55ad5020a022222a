from ulid import ULID


def new_ulid(prefix: str | None = None) -> str:
    value = str(ULID()).lower()
    return f"{prefix}{value}" if prefix else value


def new_appeal_id() -> str:
    return new_ulid("ap_")


def new_strike_id() -> str:
    return new_ulid("sk_")


def new_violation_id() -> str:
    return new_ulid("vi_")


def new_comment_id() -> str:
    return new_ulid("cm_")


def new_follow_id() -> str:
    return new_ulid("fo_")


def new_notification_id() -> str:
    return new_ulid("nt_")


def new_push_token_id() -> str:
    return new_ulid("pt_")


def new_moderator_id() -> str:
    return new_ulid("md_")


def new_ban_id() -> str:
    return new_ulid("bn_")


def new_timeout_id() -> str:
    return new_ulid("to_")


def new_pin_id() -> str:
    return new_ulid("pn_")


def new_like_id() -> str:
    return new_ulid("lk_")


def new_membership_id() -> str:
    return new_ulid("vm_")


def new_gift_id() -> str:
    return new_ulid("gf_")


def new_transaction_id() -> str:
    return new_ulid("tx_")


def new_gift_event_id() -> str:
    return new_ulid("ge_")


def new_seat_id() -> str:
    return new_ulid("gs_")


def new_invitation_id() -> str:
    return new_ulid("gi_")


def new_guest_event_id() -> str:
    return new_ulid("gv_")
