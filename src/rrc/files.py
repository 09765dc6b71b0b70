""" Answers FILE_REQUEST commands. The robot announces which files and
    folders it is willing to hand out with a
    :class:`rrc.protocol.messages.FileDefinition`; a request names one of
    them by identifier, and the answer is a
    :class:`rrc.protocol.messages.Folder` holding the file contents, or the
    contents of every file below the folder.

    Nothing here ever fails the request: an unknown identifier or a
    filesystem error produces an empty folder whose identifier explains
    what went wrong.
"""

import logging
import pathlib
import threading
import zlib

from .protocol.messages import File, Folder


logger = logging.getLogger(__name__)


class FileProvider:

    def __init__(self, definition=None):

        self._lock = threading.Lock()
        self._entries = dict()

        if definition is not None:
            self.define(definition)


    def define(self, definition):
        """ Replace the set of available files with those in *definition*.
            Entries without a matching ``isfolder`` flag are treated as
            plain files.
        """

        entries = dict()

        for index, file in enumerate(definition.files):
            try:
                isfolder = definition.isfolder[index]
            except IndexError:
                isfolder = False

            entries[file.identifier] = (file.path, isfolder)

        with self._lock:
            self._entries = entries


    def identifiers(self):
        return tuple(self._entries.keys())


    def bundle(self, identifier, compressed=False):
        """ Return a :class:`Folder` for the file or folder known by
            *identifier*, with file data zlib-compressed if *compressed*
            is True.
        """

        try:
            path, isfolder = self._entries[identifier]
        except KeyError:
            logger.warning("requested file '%s' undefined, sending empty folder", identifier)
            return Folder(identifier="file/folder :%s undefined" % (identifier))

        if isfolder:
            return self.load_folder(path, compressed)

        folder = Folder(compressed=compressed)

        try:
            folder.files.append(self.load_file(path, compressed))
        except OSError as e:
            logger.warning("cannot read '%s': %s", path, e)
            return Folder(identifier=str(e))

        return folder


    def load_file(self, path, compressed=False):
        """ Read a single file. Directories are represented with their path
            and no data.
        """

        path = pathlib.Path(path)
        file = File(path=str(path))

        if path.is_dir():
            return file

        data = path.read_bytes()

        if compressed:
            data = zlib.compress(data)

        file.data = data
        return file


    def load_folder(self, path, compressed=False):
        """ Read every file below *path*, recursively.
        """

        path = pathlib.Path(path)
        folder = Folder(compressed=compressed)

        try:
            if not path.is_dir():
                raise NotADirectoryError("not a directory: '%s'" % (path))

            for entry in sorted(path.rglob('*')):
                folder.files.append(self.load_file(entry, compressed))

        except OSError as e:
            logger.warning("cannot read folder '%s': %s", path, e)
            return Folder(identifier=str(e))

        return folder


# end of class FileProvider



def decompress(file):
    """ Return the uncompressed data of a :class:`File` received in a
        compressed :class:`Folder`.
    """

    return zlib.decompress(file.data)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
