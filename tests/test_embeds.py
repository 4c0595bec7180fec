from gangcheck.embeds import MESSAGE_LIMIT, chunk_mentions, ping_messages, remaining_messages

from .conftest import FakeMember


def test_chunks_cover_every_member_once():
    members = [FakeMember(10**17 + i, f"m{i}") for i in range(200)]
    chunks = chunk_mentions(members, sep="\n")
    assert len(chunks) > 1
    assert all(len(c) <= MESSAGE_LIMIT for c in chunks)
    joined = "\n".join(chunks).split("\n")
    assert joined == [m.mention for m in members]


def test_ping_messages_stay_under_limit_and_keep_order():
    members = [FakeMember(10**17 + i, f"m{i}") for i in range(150)]
    messages = ping_messages(members)
    assert all(len(m) <= MESSAGE_LIMIT for m in messages)
    assert messages[0].startswith("⏰ Daily check: ")
    assert messages[-1].endswith("use **/done**.")
    assert sum(m.count("<@") for m in messages) == 150


def test_short_lists_are_one_message():
    members = [FakeMember(1, "a"), FakeMember(2, "b")]
    assert remaining_messages(members) == ["<@1>\n<@2>"]
    assert ping_messages(members) == ["⏰ Daily check: <@1> <@2>\nPlease submit your 1000 bud and use **/done**."]
    assert remaining_messages([]) == ["Everyone is done. 🎉"]
    assert ping_messages([]) == []
