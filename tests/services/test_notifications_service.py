"""Tests for notification helpers and NotificationService."""

import pytest

from tests.support import USER_ID, GraphQLStub

from blog_stage.graphql import mutations
from blog_stage.services.notifications import NotificationService, badge_label, target_path


@pytest.mark.parametrize(
    "count,label",
    [(-1, ""), (0, ""), (1, "1"), (9, "9"), (10, "9+"), (250, "9+")],
)
def test_badge_label(count: int, label: str) -> None:
    assert badge_label(count) == label


def test_target_path() -> None:
    assert target_path({"data": {"post_id": "p1"}}) == "/posts/p1"
    assert target_path({"data": {"comment_id": "c1"}}) is None
    assert target_path({"data": None}) is None
    assert target_path({}) is None


@pytest.mark.asyncio
async def test_mark_all_read_counts_records_without_affected_count(stub_client: GraphQLStub) -> None:
    stub_client.on(
        mutations.MARK_ALL_NOTIFICATIONS_READ,
        {"updatenotificationsCollection": {"records": [{"id": "n1"}, {"id": "n2"}]}},
    )

    updated = await NotificationService(stub_client, "user-token").mark_all_read(USER_ID)

    assert updated == 2
    assert stub_client.called(mutations.MARK_ALL_NOTIFICATIONS_READ)[0][1] == "user-token"


@pytest.mark.asyncio
async def test_every_call_uses_user_token(stub_client: GraphQLStub) -> None:
    service = NotificationService(stub_client, "user-token")

    await service.list_notifications()
    await service.unread_count()
    await service.mark_read("n1")
    await service.delete_notification("n1")

    assert [token for _, _, token in stub_client.calls] == ["user-token"] * 4
