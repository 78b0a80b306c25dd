"""CoreData docsets reuse the type/item layout with a fresh link map per run."""

from __future__ import annotations

import logging

from docset2md.converter.standard import StandardConverter
from docset2md.formats.coredata import CoreDataFormat


logger = logging.getLogger(__name__)


class CoreDataConverter(StandardConverter):
    _format: CoreDataFormat

    def prepare(self) -> None:
        # The map must be installed before the first extract_content call.
        self.reset_index_tracking()
        self._format.set_link_mapping(None)
        link_map = self._format.build_link_mapping()
        self._format.set_link_mapping(link_map)
        logger.debug("Installed link map with %s pages", len(link_map))
