"""Arguments arrive bound, in order, as strings."""


@check
def bound():
    return args == ("one", "two")


@remediate
def explain():
    say(f"unexpected arguments: {args!r}")
