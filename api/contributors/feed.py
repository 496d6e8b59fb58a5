"""
RSS 2.0 rendering for contributor feeds.
"""

from __future__ import annotations

from xml.etree import ElementTree as ET

from .schemas import Feed

RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"


def render_rss(feed: Feed) -> str:
    rss = ET.Element("rss", {"version": "2.0"})
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = feed.title
    ET.SubElement(channel, "link").text = feed.link
    ET.SubElement(channel, "description").text = feed.description

    for item in feed.item:
        node = ET.SubElement(channel, "item")
        ET.SubElement(node, "title").text = item.title
        # ElementTree escapes the HTML; readers unescape it back.
        ET.SubElement(node, "description").text = item.description
        if item.link:
            ET.SubElement(node, "link").text = item.link
        ET.SubElement(node, "guid", {"isPermaLink": "false"}).text = item.guid

    body = ET.tostring(rss, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body
