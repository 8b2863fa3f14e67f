"""A failing check triggers exactly one remediate, then a re-check."""

state = {"checks": 0, "remediations": 0}


@check
def remediated_once():
    state["checks"] += 1
    return state["remediations"] == 1


@remediate
def fix():
    state["remediations"] += 1
    say("remediating")
