"""A unit's own name is masked while its check runs.

The nested unit ``true`` runs the external ``true`` program from its
own check. Anywhere else in this file ``true`` names the unit, so
``run("true")`` is refused as ambiguous.
"""

from unitctl.core.engine.errors import UnitError


@unit("true")
def true_unit(ctx):
    @ctx.check
    def external():
        return ctx.run("true")

    @ctx.remediate
    def explain():
        ctx.say("external 'true' did not run")


require("true")


@check
def ambiguous_refused():
    try:
        run("true")
    except UnitError:
        return True
    return False


@remediate
def explain():
    say("run('true') reached the program although a unit 'true' is in scope")
