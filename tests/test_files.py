import zlib

import rrc
from rrc import files
from rrc.protocol import messages


def definition(*entries):
    """ Build a FileDefinition from (identifier, path, isfolder) tuples.
    """

    result = messages.FileDefinition()
    for identifier, path, isfolder in entries:
        result.files.append(messages.File(identifier=identifier, path=str(path)))
        result.isfolder.append(isfolder)

    return result


def test_file(tmp_path):

    path = tmp_path / 'config.yml'
    path.write_bytes(b'key: value\n')

    provider = rrc.FileProvider(definition(('config', path, False)))
    assert provider.identifiers() == ('config',)

    folder = provider.bundle('config')
    assert folder.identifier == ''
    assert folder.compressed == False
    assert len(folder.files) == 1
    assert folder.files[0].path == str(path)
    assert folder.files[0].data == b'key: value\n'


def test_compressed(tmp_path):

    path = tmp_path / 'data.bin'
    path.write_bytes(b'x' * 1000)

    provider = rrc.FileProvider(definition(('data', path, False)))
    folder = provider.bundle('data', compressed=True)

    assert folder.compressed == True
    assert folder.files[0].data == zlib.compress(b'x' * 1000)
    assert files.decompress(folder.files[0]) == b'x' * 1000


def test_folder(tmp_path):

    root = tmp_path / 'logs'
    (root / 'nested').mkdir(parents=True)
    (root / 'one.log').write_bytes(b'1')
    (root / 'nested' / 'two.log').write_bytes(b'2')

    provider = rrc.FileProvider(definition(('logs', root, True)))
    folder = provider.bundle('logs')

    paths = [file.path for file in folder.files]
    assert str(root / 'one.log') in paths
    assert str(root / 'nested' / 'two.log') in paths
    assert str(root / 'nested') in paths

    by_path = dict((file.path, file.data) for file in folder.files)
    assert by_path[str(root / 'nested')] == b''
    assert by_path[str(root / 'nested' / 'two.log')] == b'2'


def test_missing(tmp_path):

    provider = rrc.FileProvider(definition(
        ('gone', tmp_path / 'gone.txt', False),
        ('nofolder', tmp_path / 'nofolder', True)))

    folder = provider.bundle('undefined')
    assert folder.files == []
    assert folder.identifier == 'file/folder :undefined undefined'

    folder = provider.bundle('gone')
    assert folder.files == []
    assert 'gone.txt' in folder.identifier

    folder = provider.bundle('nofolder')
    assert folder.files == []
    assert 'nofolder' in folder.identifier


def test_redefine(tmp_path):

    path = tmp_path / 'a'
    path.write_bytes(b'a')

    provider = rrc.FileProvider()
    assert provider.identifiers() == ()

    provider.define(definition(('a', path, False)))
    assert provider.bundle('a').files[0].data == b'a'

    provider.define(messages.FileDefinition(files=[messages.File(identifier='b', path=str(path))]))
    assert provider.identifiers() == ('b',)
    assert provider.bundle('b').files[0].data == b'a'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
