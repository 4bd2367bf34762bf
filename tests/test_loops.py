import os
import shutil
import sys

import numpy as np
import pytest

from tec2hdf5.loops import LOOP_COLUMNS, LoopFileError, find_loop_files, \
    main, read_loop_file, read_loop_files, write_average_loop

from .util import get_test_data_file


def _write_loop(path, fields):
    with open(path, 'w') as loop_file:
        loop_file.write('B, Bx, By, Bz, Mx, My, Mz, Ms, Vol\n')
        for field in fields:
            loop_file.write(f'{field}, 1.0, 0.0, 0.0, 1e-16, 2e-16, 3e-16, '
                            f'480000.0, 6e-22\n')


def test_read_loop_file():
    loop = read_loop_file(get_test_data_file('basic1.loop'))
    assert loop.dtype.names == tuple(LOOP_COLUMNS)
    assert len(loop) == 4
    assert loop['b'][0] == 0.2
    assert loop['b'][3] == 0.1997
    assert loop['mz'][1] == -1.22748051e-16
    assert loop['ms'][2] == 476799.747


def test_read_loop_file_skips_malformed_rows(tmp_path):
    path = str(tmp_path / 'odd.loop')
    with open(path, 'w') as loop_file:
        loop_file.write('B, Bx, By, Bz, Mx, My, Mz, Ms, Vol\n')
        loop_file.write('0.2, 1, 0, 0, 1, 2, 3, 4, 5\n')
        loop_file.write('\n')
        loop_file.write('# a comment\n')
        loop_file.write('0.1, 1, 0, 0, 1, 2, 3, 4\n')
        loop_file.write('0.0, 1, 0, 0, 1, 2, 3, 4, 5\n')
    loop = read_loop_file(path)
    np.testing.assert_array_equal(loop['b'], [0.2, 0.0])


def test_average_loops():
    stack = read_loop_files([get_test_data_file('basic1.loop'),
                             get_test_data_file('basic2.loop')])
    assert stack.nloops == 2
    assert stack.steps == 4
    assert stack.field_start == 0.2
    assert stack.field_end == 0.1997
    assert stack.field_step == pytest.approx(-0.0001)

    average = stack.average()
    assert len(average) == 4
    assert average['mx'][0] == pytest.approx(2.587894755e-16, rel=1e-12)
    assert average['my'][3] == pytest.approx(2.787937485e-17, rel=1e-12)
    assert average['mz'][2] == pytest.approx(-1.23774246e-16, rel=1e-12)
    np.testing.assert_allclose(average['ms'], 476799.747)
    np.testing.assert_allclose(average['b'], [0.2, 0.1999, 0.1998, 0.1997])


def test_loops_of_different_length():
    with pytest.raises(LoopFileError, match='not the same length'):
        read_loop_files([get_test_data_file('basic1.loop'),
                         get_test_data_file('basic3.loop')])


def test_no_loop_files():
    with pytest.raises(LoopFileError):
        read_loop_files([])


def test_too_few_steps(tmp_path):
    path = str(tmp_path / 'short.loop')
    _write_loop(path, [0.2])
    with pytest.raises(LoopFileError, match='at least 2'):
        read_loop_files([path])


def test_non_uniform_step(tmp_path):
    path = str(tmp_path / 'bad.loop')
    _write_loop(path, [0.2, 0.1, 0.05])
    with pytest.raises(LoopFileError, match='Field step 1'):
        read_loop_files([path])


def test_different_start_field(tmp_path):
    first = str(tmp_path / 'a.loop')
    second = str(tmp_path / 'b.loop')
    _write_loop(first, [0.2, 0.1, 0.0])
    _write_loop(second, [0.3, 0.2, 0.1])
    with pytest.raises(LoopFileError, match='Start field'):
        read_loop_files([first, second])


def test_find_loop_files(tmp_path):
    for name in ['basic1.loop', 'basic2.loop', 'basic3.loop']:
        shutil.copy(get_test_data_file(name), tmp_path / name)
    (tmp_path / 'notes.txt').write_text('not a loop\n')
    os.makedirs(tmp_path / 'basic4.loop')

    found = find_loop_files(str(tmp_path), r'basic[12]\.loop$')
    assert found == [str(tmp_path / 'basic1.loop'),
                     str(tmp_path / 'basic2.loop')]
    assert len(find_loop_files(str(tmp_path), r'\.loop$')) == 3


def test_write_average_loop(tmp_path):
    stack = read_loop_files([get_test_data_file('basic1.loop'),
                             get_test_data_file('basic2.loop')])
    average = stack.average()
    filename = str(tmp_path / 'average.loop')
    write_average_loop(average, filename)

    with open(filename) as f:
        lines = f.read().splitlines()
    assert len(lines) == 5
    assert lines[0].split(', ')[0].strip() == 'B (Tesla)'
    values = [float(value) for value in lines[1].split(',')]
    assert values[0] == pytest.approx(0.2)
    moment = np.sqrt(average['mx'][0]**2 + average['my'][0]**2 +
                     average['mz'][0]**2)
    assert values[1] == pytest.approx(moment, rel=1e-7)
    assert values[2] == pytest.approx(476799.747)
    assert values[3] == pytest.approx(6.14125004e-22)
    assert len(lines[1].split(', ')[0]) == 15


def test_main(tmp_path, monkeypatch):
    loop_dir = tmp_path / 'loops'
    os.makedirs(loop_dir)
    for name in ['basic1.loop', 'basic2.loop']:
        shutil.copy(get_test_data_file(name), loop_dir / name)
    output_file = str(tmp_path / 'average.loop')
    log_filename = str(tmp_path / 'loopavg.log')
    monkeypatch.setattr(sys, 'argv', [
        'loopavg', str(loop_dir), r'\.loop$', output_file, '--verbose',
        '--log', log_filename])
    main()

    with open(output_file) as f:
        assert len(f.read().splitlines()) == 5
    with open(log_filename) as f:
        log = f.read()
    assert 'Processing 2 loop files' in log
    assert '2 loops of 4 steps' in log
