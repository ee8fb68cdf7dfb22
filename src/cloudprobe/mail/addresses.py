import uuid


def generate_capture_address(template: str) -> str:
    """Fill the ``%s`` slot of a capture-inbox address with a fresh UUID.

    >>> generate_capture_address("inbox+%s@inbox.mailtrap.io")  # doctest: +SKIP
    'inbox+3f0c...@inbox.mailtrap.io'
    """
    if "%s" not in template:
        raise ValueError(f"Address template has no '%s' placeholder: {template}")
    return template.replace("%s", str(uuid.uuid4()))
