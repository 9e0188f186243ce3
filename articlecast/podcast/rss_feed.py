"""RSS 2.0 feed generation with the iTunes image extension."""

from collections.abc import Sequence
from datetime import datetime
from urllib.parse import quote
from xml.etree.ElementTree import Element, SubElement, indent, register_namespace, tostring

from articlecast.core.datetime_utils import format_rfc1123, local_now
from articlecast.schemas.podcast import ChannelConfig, Episode

# iTunes namespace
ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"

register_namespace("itunes", ITUNES_NS)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'


def artifact_url(link: str, filename: str) -> str:
    """Build the public URL of an episode file under the channel link."""
    return f"{link.rstrip('/')}/{quote(filename)}"


def generate_podcast_rss(
    episodes: Sequence[Episode],
    channel: ChannelConfig,
    now: datetime | None = None,
) -> str:
    """
    Generate an RSS 2.0 podcast feed.

    Args:
        episodes: Episodes in the order they should appear
        channel: Channel metadata (title, link, description, optional image)
        now: Build time for pubDate/lastBuildDate (default: current local time)

    Returns:
        RSS XML as string, prefixed with the XML declaration
    """
    build_date = format_rfc1123(now or local_now())

    rss = Element("rss", {"version": "2.0"})
    channel_el = SubElement(rss, "channel")

    # Required channel elements
    SubElement(channel_el, "title").text = channel.title
    SubElement(channel_el, "link").text = channel.link
    SubElement(channel_el, "description").text = channel.description
    SubElement(channel_el, "language").text = "en-us"
    SubElement(channel_el, "pubDate").text = build_date
    SubElement(channel_el, "lastBuildDate").text = build_date

    if channel.image:
        SubElement(channel_el, f"{{{ITUNES_NS}}}image", {"href": channel.image})

    for episode in episodes:
        item = SubElement(channel_el, "item")
        episode_link = artifact_url(channel.link, episode.content_file)

        SubElement(item, "title").text = episode.content_file
        SubElement(item, "link").text = episode_link
        SubElement(item, "description").text = episode.summary
        SubElement(item, "pubDate").text = format_rfc1123(episode.created_at)
        SubElement(item, "guid").text = episode_link

        # Enclosure (the actual audio file); size is not measured
        SubElement(
            item,
            "enclosure",
            {
                "url": artifact_url(channel.link, episode.audio_file),
                "length": "0",
                "type": "audio/mpeg",
            },
        )
        SubElement(
            item,
            f"{{{ITUNES_NS}}}image",
            {"href": artifact_url(channel.link, episode.illustration_file)},
        )

    indent(rss, space="  ")
    xml_str = tostring(rss, encoding="unicode", method="xml")

    return XML_DECLARATION + xml_str
