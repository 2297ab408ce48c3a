import xml.etree.ElementTree as ET
from typing import List

from syncast.errors import ConfigError
from syncast.models import Folder


IMPORTED_FOLDER = 'imported'


def export_opml(path: str, folders: List[Folder]) -> None:
    opml = ET.Element('opml', version='2.0')
    head = ET.SubElement(opml, 'head')
    ET.SubElement(head, 'title').text = 'SynCast feeds'
    body = ET.SubElement(opml, 'body')
    for folder in folders:
        group = ET.SubElement(body, 'outline', text=folder.name)
        for url in folder.feeds:
            ET.SubElement(group, 'outline', text=url, type='rss', xmlUrl=url)
    tree = ET.ElementTree(opml)
    try:
        tree.write(path, encoding='utf-8', xml_declaration=True)
    except OSError as e:
        raise ConfigError(f"Failed to export OPML to {path}: {e}") from e


def import_opml(path: str) -> List[Folder]:
    """Read folders from an OPML file.

    Top-level outlines with children become folders; bare feed outlines
    directly under <body> are collected into an ``imported`` folder.
    """
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as e:
        raise ConfigError(f"Failed to import OPML from {path}: {e}") from e
    body = root.find('body')
    if body is None:
        raise ConfigError(f"Failed to import OPML from {path}: no <body> element")

    folders: List[Folder] = []
    loose = Folder(name=IMPORTED_FOLDER)
    for outline in body.findall('outline'):
        url = (outline.attrib.get('xmlUrl') or '').strip()
        children = list(outline.iter('outline'))[1:]
        if url and not children:
            loose.feeds.append(url)
            continue
        name = ' '.join((outline.attrib.get('text') or outline.attrib.get('title') or '').split()) or IMPORTED_FOLDER
        folder = Folder(name=name)
        for child in children:
            child_url = (child.attrib.get('xmlUrl') or '').strip()
            if child_url and child_url not in folder.feeds:
                folder.feeds.append(child_url)
        folders.append(folder)
    if loose.feeds:
        folders.append(loose)
    return folders


def merge_folders(existing: List[Folder], incoming: List[Folder]) -> int:
    """Merge ``incoming`` into ``existing`` in place. Returns count of added feeds."""
    by_name = {f.name: f for f in existing}
    added = 0
    for folder in incoming:
        target = by_name.get(folder.name)
        if target is None:
            target = Folder(name=folder.name)
            existing.append(target)
            by_name[folder.name] = target
        for url in folder.feeds:
            if url not in target.feeds:
                target.feeds.append(url)
                added += 1
    return added
