import asyncio

from conftest import dated_feed, rss_feed, rss_item
from feedintel.aggregator import sort_by_recency
from feedintel.exceptions import TransportError
from feedintel.models.article import Article, parse_pub_date
from feedintel.models.source import ALL_SOURCES


def _assert_descending(articles):
    dates = [parse_pub_date(a.pub_date) for a in articles]
    for earlier, later in zip(dates, dates[1:]):
        assert earlier >= later


def test_duplicate_links_keep_first_source_copy(sources, transport, aggregator_factory):
    alpha, beta, _ = sources
    transport.responses[alpha.url] = rss_feed([
        rss_item(title="Alpha copy", link="https://x/1", pub_date="Mon, 01 Jan 2024 10:00:00 GMT"),
    ])
    transport.responses[beta.url] = rss_feed([
        rss_item(title="Beta copy", link="https://x/1", pub_date="Tue, 02 Jan 2024 10:00:00 GMT"),
        rss_item(title="Beta only", link="https://x/2", pub_date="Tue, 02 Jan 2024 11:00:00 GMT"),
    ])

    result = asyncio.run(aggregator_factory().aggregate_all([alpha, beta]))

    matching = [a for a in result.articles if a.link == "https://x/1"]
    assert len(matching) == 1
    assert matching[0].title == "Alpha copy"
    assert len(result.articles) == 2


def test_merge_order_does_not_depend_on_settle_order(sources, transport, aggregator_factory):
    alpha, beta, _ = sources
    transport.responses[alpha.url] = rss_feed([rss_item(title="Alpha copy", link="https://x/1")])
    transport.responses[beta.url] = rss_feed([rss_item(title="Beta copy", link="https://x/1")])

    async def scenario():
        # alpha settles last but still wins the dedup
        gate = transport.hold(alpha.url)
        task = asyncio.ensure_future(aggregator_factory().aggregate_all([alpha, beta]))
        await asyncio.sleep(0.01)
        gate.set()
        return await task

    result = asyncio.run(scenario())

    assert [a.title for a in result.articles] == ["Alpha copy"]


def test_articles_sorted_newest_first(sources, transport, aggregator_factory):
    alpha, beta, gamma = sources
    transport.responses[alpha.url] = dated_feed("alpha", 5, start_day=1)
    transport.responses[beta.url] = dated_feed("beta", 5, start_day=10)
    transport.responses[gamma.url] = dated_feed("gamma", 5, start_day=5)

    result = asyncio.run(aggregator_factory().aggregate_all(sources))

    assert len(result.articles) == 15
    _assert_descending(result.articles)
    assert result.articles[0].title == "beta 0"


def test_all_sources_truncated_to_cap(transport, aggregator_factory):
    from feedintel.models.source import Source

    many = [Source(f"Feed {i}", f"https://feed{i}.example.com/rss") for i in range(4)]
    for i, source in enumerate(many):
        transport.responses[source.url] = dated_feed(f"feed{i}", 15, start_day=i + 1)

    default_cap = asyncio.run(aggregator_factory().aggregate_all(many))
    small_cap = asyncio.run(aggregator_factory(max_all_articles=7).aggregate_all(many))

    assert len(default_cap.articles) == 50
    _assert_descending(default_cap.articles)
    assert len(small_cap.articles) == 7


def test_subset_is_not_capped(transport, aggregator_factory):
    from feedintel.models.source import Source

    many = [Source(f"Feed {i}", f"https://feed{i}.example.com/rss") for i in range(4)]
    for i, source in enumerate(many):
        transport.responses[source.url] = dated_feed(f"feed{i}", 15, start_day=i + 1)

    result = asyncio.run(aggregator_factory(max_all_articles=10).aggregate_subset(many))

    assert len(result.articles) == 60


def test_one_failing_source_does_not_abort_others(sources, transport, aggregator_factory):
    alpha, beta, gamma = sources
    transport.responses[alpha.url] = dated_feed("alpha", 3, start_day=1)
    transport.responses[beta.url] = TransportError(beta.url, 500, "Internal Server Error")
    transport.responses[gamma.url] = dated_feed("gamma", 3, start_day=4)

    result = asyncio.run(aggregator_factory().aggregate_all(sources))

    assert result.succeeded == 2
    assert result.total == 3
    assert {a.link for a in result.articles} == (
        {f"https://alpha.example.com/{i}" for i in range(3)}
        | {f"https://gamma.example.com/{i}" for i in range(3)}
    )
    _assert_descending(result.articles)
    assert [source for source, _ in result.failures] == [beta]


def test_cancelled_source_counts_as_failure(sources, transport, aggregator_factory):
    alpha, beta, gamma = sources
    transport.responses[alpha.url] = dated_feed("alpha", 2, start_day=1)
    transport.responses[beta.url] = asyncio.CancelledError()
    transport.responses[gamma.url] = dated_feed("gamma", 2, start_day=4)

    result = asyncio.run(aggregator_factory().aggregate_all(sources))

    assert result.succeeded == 2
    assert [source for source, _ in result.failures] == [beta]
    assert len(result.articles) == 4


def test_all_sources_failing_returns_empty_result(sources, transport, aggregator_factory):
    transport.responses[sources[0].url] = b"<broken"

    result = asyncio.run(aggregator_factory().aggregate_all(sources))

    assert result.articles == ()
    assert result.all_failed
    assert result.summary() == "0 of 3 sources returned data"


def test_empty_feeds_are_not_total_failure(sources, transport, aggregator_factory):
    for source in sources:
        transport.responses[source.url] = rss_feed([])

    result = asyncio.run(aggregator_factory().aggregate_all(sources))

    assert result.articles == ()
    assert not result.all_failed


def test_sentinel_is_never_fetched(sources, transport, aggregator_factory):
    transport.responses[sources[0].url] = dated_feed("alpha", 2)

    result = asyncio.run(aggregator_factory().aggregate_all([ALL_SOURCES, sources[0]]))

    assert ALL_SOURCES.url not in transport.calls
    assert result.total == 1


def test_articles_without_link_are_dropped(sources, transport, aggregator_factory):
    transport.responses[sources[0].url] = rss_feed([
        rss_item(title="No link"),
        rss_item(title="Linked", link="https://a/1"),
    ])

    result = asyncio.run(aggregator_factory().aggregate_all(sources[:1]))

    assert [a.title for a in result.articles] == ["Linked"]


def test_concurrency_is_bounded(sources, transport, aggregator_factory):
    in_flight = []
    peak = []

    original = transport.fetch_text

    async def tracking_fetch(url):
        in_flight.append(url)
        peak.append(len(in_flight))
        await asyncio.sleep(0.01)
        try:
            return await original(url)
        finally:
            in_flight.remove(url)

    transport.fetch_text = tracking_fetch
    for source in sources:
        transport.responses[source.url] = dated_feed(source.name.lower(), 1)

    result = asyncio.run(aggregator_factory(max_concurrent=1).aggregate_all(sources))

    assert max(peak) == 1
    assert result.succeeded == 3


def test_sort_by_recency_puts_undated_last_in_merge_order():
    articles = [
        Article(title="undated-1", link="https://a/u1", guid="u1", pub_date=""),
        Article(title="old", link="https://a/old", guid="old", pub_date="2024-01-01T00:00:00Z"),
        Article(title="garbage", link="https://a/g", guid="g", pub_date="not a date"),
        Article(title="new", link="https://a/new", guid="new", pub_date="2024-03-01T00:00:00+02:00"),
        Article(title="undated-2", link="https://a/u2", guid="u2"),
    ]

    ordered = [a.title for a in sort_by_recency(articles)]

    assert ordered == ["new", "old", "undated-1", "garbage", "undated-2"]
