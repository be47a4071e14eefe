"""What-if overrides for tax profiles."""

import logging

from src.models import ScenarioChange, TaxProfile

logger = logging.getLogger(__name__)


def apply_changes(profile: TaxProfile, changes: list[ScenarioChange]) -> TaxProfile:
    """Return a deep copy of `profile` with each change applied by field name.

    Fields are addressed by their canonical path (see
    `src.models.resolve_profile_field`), so two fields holding equal amounts
    can never be confused. A later change to the same field wins.
    """
    simulated = profile.model_copy(deep=True)

    for change in changes:
        group, _, name = change.field.partition(".")
        if group == "income":
            setattr(simulated.income, name, change.new_value)
        elif name.startswith("others."):
            simulated.deductions.others[name[len("others."):]] = change.new_value
        else:
            setattr(simulated.deductions, name, change.new_value)
        logger.debug("Scenario override %s = %s", change.field, change.new_value)

    return simulated
