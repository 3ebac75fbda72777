import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from feedintel.aggregator import Aggregator  # noqa: E402
from feedintel.config import AggregationConfig, FeedConfig  # noqa: E402
from feedintel.exceptions import TransportError  # noqa: E402
from feedintel.fetcher import SourceFetcher  # noqa: E402
from feedintel.models.source import Source  # noqa: E402
from feedintel.parsing.feed_parser import FeedParser  # noqa: E402
from feedintel.reports import ReportGenerator, ReportRequest  # noqa: E402
from feedintel.transport import Transport  # noqa: E402


def rss_item(title: str = "", link: str = "", guid: str = "", pub_date: str = "", extra: str = "") -> str:
    parts = []
    if title:
        parts.append(f"<title>{title}</title>")
    if link:
        parts.append(f"<link>{link}</link>")
    if guid:
        parts.append(f"<guid>{guid}</guid>")
    if pub_date:
        parts.append(f"<pubDate>{pub_date}</pubDate>")
    parts.append(extra)
    return "<item>" + "".join(parts) + "</item>"


def rss_feed(items: Sequence[str], title: str = "Sample Feed", link: str = "https://feed.example.com/") -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/" '
        'xmlns:content="http://purl.org/rss/1.0/modules/content/" '
        'xmlns:media="http://search.yahoo.com/mrss/">'
        f"<channel><title>{title}</title><link>{link}</link>"
        "<description>Sample description</description>"
        + "".join(items)
        + "</channel></rss>"
    ).encode("utf-8")


def dated_feed(prefix: str, count: int, start_day: int = 1, title: str = "Sample Feed") -> bytes:
    """Feed of ``count`` items on consecutive January 2024 days, newest first."""
    items = []
    for i in range(count):
        day = start_day + count - 1 - i
        items.append(rss_item(
            title=f"{prefix} {i}",
            link=f"https://{prefix}.example.com/{i}",
            pub_date=f"Mon, {day:02d} Jan 2024 10:00:00 GMT",
        ))
    return rss_feed(items, title=title)


ATOM_FEED = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Sample</title>
  <subtitle>Atom subtitle</subtitle>
  <link href="https://atom.example.com/"/>
  <id>urn:uuid:feed</id>
  <updated>2024-01-05T10:00:00Z</updated>
  <entry>
    <title>Atom entry</title>
    <link href="https://atom.example.com/posts/1"/>
    <id>urn:uuid:entry-1</id>
    <published>2024-01-04T09:00:00Z</published>
    <updated>2024-01-05T09:00:00Z</updated>
    <author><name>Jane Analyst</name></author>
    <summary>Short summary</summary>
    <content type="html">&lt;p&gt;Full &lt;b&gt;content&lt;/b&gt;&lt;/p&gt;</content>
    <category term="ransomware"/>
    <category term="cve"/>
  </entry>
  <entry>
    <title>Updated only</title>
    <link href="https://atom.example.com/posts/2"/>
    <id>urn:uuid:entry-2</id>
    <updated>2024-01-03T08:00:00Z</updated>
  </entry>
</feed>
"""

RDF_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns="http://purl.org/rss/1.0/"
         xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel rdf:about="https://rdf.example.com/">
    <title>RDF Sample</title>
    <link>https://rdf.example.com/</link>
    <description>RDF description</description>
  </channel>
  <item rdf:about="https://rdf.example.com/a">
    <title>RDF item</title>
    <link>https://rdf.example.com/a</link>
    <dc:creator>Rdf Author</dc:creator>
    <dc:date>2024-01-02T12:00:00Z</dc:date>
  </item>
</rdf:RDF>
"""


class FakeTransport(Transport):
    """Scripted transport: url -> body bytes or exception to raise."""

    def __init__(self, responses: Optional[Dict[str, Union[bytes, BaseException]]] = None) -> None:
        self.responses: Dict[str, Union[bytes, BaseException]] = dict(responses or {})
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[str] = []

    def hold(self, url: str) -> asyncio.Event:
        """Block fetches of ``url`` until the returned event is set."""
        gate = asyncio.Event()
        self.gates[url] = gate
        return gate

    async def fetch_text(self, url: str) -> bytes:
        self.calls.append(url)
        gate = self.gates.get(url)
        if gate is not None:
            await gate.wait()
        response = self.responses.get(url)
        if response is None:
            raise TransportError(url, 404, "Not Found")
        if isinstance(response, BaseException):
            raise response
        return response


class RecordingReportGenerator(ReportGenerator):
    def __init__(self, text: str = "report text", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.requests: List[ReportRequest] = []

    async def generate(self, request: ReportRequest) -> str:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def sources() -> List[Source]:
    return [
        Source("Alpha", "https://alpha.example.com/feed"),
        Source("Beta", "https://beta.example.com/feed"),
        Source("Gamma", "https://gamma.example.com/feed"),
    ]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def fetcher(transport) -> SourceFetcher:
    return SourceFetcher(transport, FeedParser())


@pytest.fixture
def aggregator_factory(fetcher):
    def _factory(max_all_articles: int = 50, max_concurrent: int = 8) -> Aggregator:
        return Aggregator(
            fetcher,
            feed_config=FeedConfig(max_concurrent=max_concurrent),
            aggregation_config=AggregationConfig(max_all_articles=max_all_articles),
        )

    return _factory


@pytest.fixture
def report_generator() -> RecordingReportGenerator:
    return RecordingReportGenerator()
