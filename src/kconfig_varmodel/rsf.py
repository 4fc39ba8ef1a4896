# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
# reads the .rsf file written by kconfigreader: a textual dump of all Kconfig items, terminated by
# "\n.\n", followed by the XML menu tree that dumpconf printed
#
# <submenu>
#   <menu flags="..."><symbol type="boolean" flags="..." id="3"><name>A</name>
#     <property type="depends">S@1 &amp;&amp; S@2</property></symbol><dep>...</dep></menu>
#   <submenu>...</submenu>
# </submenu>

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set
from xml.dom import Node, minidom
from xml.parsers.expat import ExpatError

from .errors import FormatError
from .model import SymbolBuilder, kind_for_type

logger = logging.getLogger(__name__)

PREFIX = 'CONFIG_'
TERMINATOR = b'\n.\n'
ID_PREFIX = 'S@'
ID_PATTERN = re.compile(r'S@[0-9]+')
DIGITS = re.compile(r'[0-9]+')
CHOICE_FLAG = 0x0010


@dataclass
class RsfTree:
    symbols: Dict[str, SymbolBuilder] = field(default_factory=dict)
    # "S@<id>" -> symbol name
    id_to_name: Dict[str, str] = field(default_factory=dict)
    # symbol name -> ids referenced in its properties
    used_ids: Dict[str, Set[str]] = field(default_factory=dict)
    choice_count: int = 0


def is_ignorable(node):
    return node.nodeType == Node.TEXT_NODE and not node.data.strip()


def describe(node):
    if node.nodeType == Node.ELEMENT_NODE:
        return f'<{node.tagName}>'
    return node.nodeName


def text_content(node):
    parts = []
    for child in node.childNodes:
        if child.nodeType in (Node.TEXT_NODE, Node.CDATA_SECTION_NODE):
            parts.append(child.data)
        elif child.nodeType == Node.ELEMENT_NODE:
            parts.append(text_content(child))
    return ''.join(parts)


def is_element(node, tag):
    return node.nodeType == Node.ELEMENT_NODE and node.tagName == tag


def read_xml_payload(file):
    with open(file, mode='rb') as f:
        data = f.read()
    index = data.find(TERMINATOR)
    if index == -1:
        raise FormatError(f'Expected rsf file {file} to contain "\\n.\\n" before the menu tree')
    try:
        return minidom.parseString(data[index + len(TERMINATOR):])
    except ExpatError as e:
        raise FormatError(f'Invalid XML menu tree in {file}: {e}') from e


def numeric_attribute(symbol, attribute):
    if not symbol.hasAttribute(attribute):
        raise FormatError(f'No {attribute} attribute in <symbol>')
    value = symbol.getAttribute(attribute)
    # int() would also take "+1", " 1" and "1_0", which no S@<id> reference can match
    if not DIGITS.fullmatch(value):
        raise FormatError(f'Invalid {attribute} attribute in <symbol>: {value!r}')
    return int(value)


def used_ids_in(text, own_id) -> Set[str]:
    return {match for match in ID_PATTERN.findall(text) if match != own_id}


def find_symbol(menu):
    symbol = None
    for child in menu.childNodes:
        if is_element(child, 'symbol'):
            if symbol is not None:
                raise FormatError('More than one <symbol> in <menu>')
            symbol = child
        elif is_element(child, 'dep') or is_ignorable(child):
            # <dep> repeats conditions that also appear in the <property> elements
            continue
        else:
            raise FormatError(f'Unexpected tag in <menu>: {describe(child)}')
    return symbol


def creates_cycle(name, parent, tree):
    while parent is not None:
        if parent == name:
            return True
        parent = tree.symbols[parent].parent
    return False


def create_symbol(symbol_id, name, type_name, used_ids, stack, tree):
    tree.id_to_name[symbol_id] = name
    tree.used_ids[name] = used_ids

    if name in tree.symbols:
        logger.warning('%s is declared more than once in the menu tree, keeping the last declaration', name)
    builder = SymbolBuilder(name, kind_for_type(type_name))

    # the symbol created last one level up is the parent
    stack[-1] = builder
    if len(stack) >= 2 and stack[-2] is not None:
        parent = stack[-2].name
        if creates_cycle(name, parent, tree):
            logger.warning('%s would become its own ancestor through %s, leaving it without parent', name, parent)
        else:
            builder.parent = parent

    tree.symbols[name] = builder


def read_menu(menu, stack: List[Optional[SymbolBuilder]], tree: RsfTree):
    symbol = find_symbol(menu)
    if symbol is None:
        return

    if not symbol.hasAttribute('type'):
        raise FormatError('No type attribute in <symbol>')
    type_name = symbol.getAttribute('type')
    if type_name == 'boolean':
        type_name = 'bool'
    numeric_attribute(symbol, 'id')
    symbol_id = ID_PREFIX + symbol.getAttribute('id')
    choice = (numeric_attribute(symbol, 'flags') & CHOICE_FLAG) != 0

    name = None
    used_ids: Set[str] = set()
    for child in symbol.childNodes:
        if is_element(child, 'name'):
            if name is not None:
                raise FormatError(f'More than one <name> for symbol {name}')
            name = text_content(child)
        elif is_element(child, 'property'):
            used_ids |= used_ids_in(text_content(child), symbol_id)
        elif not is_ignorable(child):
            raise FormatError(f'Unexpected tag in <symbol>: {describe(child)}')

    if name is None:
        if not choice:
            raise FormatError(f'No <name> found in <symbol> {symbol_id}')
        tree.choice_count += 1
        name = f'CHOICE_{tree.choice_count}'

    create_symbol(symbol_id, PREFIX + name, type_name, used_ids, stack, tree)


def read_submenu(submenu, stack: List[Optional[SymbolBuilder]], tree: RsfTree):
    stack.append(None)
    for node in submenu.childNodes:
        if is_element(node, 'submenu'):
            read_submenu(node, stack, tree)
        elif is_element(node, 'menu'):
            read_menu(node, stack, tree)
        elif not is_ignorable(node):
            raise FormatError(f'Unexpected tag in structure: {describe(node)}')
    stack.pop()


def read_rsf(file) -> RsfTree:
    """Reads the menu tree of the given .rsf file.

    Parents are resolved; the used ids are still raw "S@<id>" references.
    """
    document = read_xml_payload(file)
    root = document.documentElement
    if root.tagName != 'submenu':
        raise FormatError(f'Top level element is not a <submenu> but <{root.tagName}>')

    tree = RsfTree()
    read_submenu(root, [], tree)
    document.unlink()

    logger.info('read %d symbols from menu tree of %s', len(tree.symbols), file)
    return tree
