from decimal import Decimal

import pytest

from challengehub.core.enums.campaigns import BonusStatus
from challengehub.core.exceptions import NotFoundError
from challengehub.earnings.services import compute_campaign_standing


def test_single_complete_challenge(db, factory):
    manager = factory.manager()
    contributor = factory.contributor(manager=manager)
    campaign = factory.campaign()
    _, actions = factory.challenge(campaign, value="1.00", actions=2)
    for action in actions:
        factory.complete(contributor, action)

    standing = compute_campaign_standing(db, contributor.id, campaign.id)

    assert standing.total_earnings == Decimal("1.00")
    assert standing.completed_challenges == 1
    assert standing.total_challenges == 1
    assert standing.completion_percentage == Decimal("100.00")


def test_partial_completion_does_not_count(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()
    _, actions = factory.challenge(campaign, value="2.00", actions=3)
    factory.complete(contributor, actions[0])
    factory.complete(contributor, actions[1])

    standing = compute_campaign_standing(db, contributor.id, campaign.id)

    assert standing.completed_challenges == 0
    assert standing.total_challenges == 1
    assert standing.completion_percentage == Decimal("0.00")
    assert standing.total_earnings == Decimal("0.00")


def test_unfinished_user_action_rows_are_not_completions(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()
    _, actions = factory.challenge(campaign, actions=2)
    factory.complete(contributor, actions[0])
    factory.complete(contributor, actions[1], completed=False)

    assert compute_campaign_standing(db, contributor.id, campaign.id).completed_challenges == 0


def test_zero_action_challenge_never_completes(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()
    factory.challenge(campaign, value="3.00", actions=0)
    _, actions = factory.challenge(campaign, value="1.00", actions=1, day=2)
    factory.complete(contributor, actions[0])

    standing = compute_campaign_standing(db, contributor.id, campaign.id)

    assert standing.completed_challenges == 1
    assert standing.total_challenges == 2
    assert standing.total_earnings == Decimal("1.00")
    assert standing.completion_percentage == Decimal("50.00")


def test_decimal_sum_has_no_float_drift(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()
    for day in (1, 2, 3):
        _, actions = factory.challenge(campaign, value="0.50", actions=1, day=day)
        factory.complete(contributor, actions[0])

    standing = compute_campaign_standing(db, contributor.id, campaign.id)

    assert standing.total_earnings == Decimal("1.50")
    assert str(standing.total_earnings) == "1.50"


def test_only_approved_bonuses_are_paid(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()
    other_campaign = factory.campaign(name="Other")
    factory.bonus(contributor, campaign, amount="0.10")
    factory.bonus(contributor, campaign, amount="0.20")
    factory.bonus(contributor, campaign, amount="9.00", status=BonusStatus.PENDING)
    factory.bonus(contributor, campaign, amount="7.00", status=BonusStatus.REJECTED)
    factory.bonus(contributor, other_campaign, amount="4.00")

    standing = compute_campaign_standing(db, contributor.id, campaign.id)

    assert standing.total_earnings == Decimal("0.30")
    assert standing.total_challenges == 0
    assert standing.completion_percentage == Decimal("0.00")


def test_earnings_combine_challenges_and_bonuses(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()
    _, actions = factory.challenge(campaign, value="0.50", actions=2)
    for action in actions:
        factory.complete(contributor, action)
    factory.bonus(contributor, campaign, amount="10.00")

    assert compute_campaign_standing(db, contributor.id, campaign.id).total_earnings == Decimal("10.50")


def test_completion_percentage_rounds_half_up(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()
    challenges = [factory.challenge(campaign, actions=1, day=day)[1][0] for day in (1, 2, 3)]
    factory.complete(contributor, challenges[0])
    assert compute_campaign_standing(db, contributor.id, campaign.id).completion_percentage == Decimal("33.33")

    factory.complete(contributor, challenges[1])
    assert compute_campaign_standing(db, contributor.id, campaign.id).completion_percentage == Decimal("66.67")


def test_other_contributors_completions_do_not_leak(db, factory):
    contributor = factory.contributor()
    colleague = factory.contributor()
    campaign = factory.campaign()
    _, actions = factory.challenge(campaign, actions=2)
    factory.complete(contributor, actions[0])
    factory.complete(colleague, actions[1])

    assert compute_campaign_standing(db, contributor.id, campaign.id).completed_challenges == 0


def test_completing_more_actions_never_decreases_standing(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()
    _, first = factory.challenge(campaign, value="1.00", actions=2)
    _, second = factory.challenge(campaign, value="0.75", actions=1, day=2)
    factory.challenge(campaign, value="5.00", actions=0, day=3)

    previous = compute_campaign_standing(db, contributor.id, campaign.id)
    for action in [first[0], second[0], first[1]]:
        factory.complete(contributor, action)
        current = compute_campaign_standing(db, contributor.id, campaign.id)
        assert current.completed_challenges >= previous.completed_challenges
        assert current.total_earnings >= previous.total_earnings
        previous = current

    assert previous.completed_challenges == 2
    assert previous.total_earnings == Decimal("1.75")


def test_standing_is_zero_without_activity(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()
    factory.challenge(campaign, actions=2)

    standing = compute_campaign_standing(db, contributor.id, campaign.id)

    assert standing.total_earnings == Decimal("0.00")
    assert standing.completed_challenges == 0
    assert standing.total_challenges == 1


def test_unknown_campaign_or_contributor_is_not_found(db, factory):
    contributor = factory.contributor()
    campaign = factory.campaign()

    with pytest.raises(NotFoundError):
        compute_campaign_standing(db, contributor.id, 9999)
    with pytest.raises(NotFoundError):
        compute_campaign_standing(db, 9999, campaign.id)
