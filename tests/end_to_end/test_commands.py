import io
import os
import sys
from unittest.mock import patch

import pytest
import yaml

from spanr.constants import EXIT_ERROR, EXIT_OK
from spanr.main import main

from ..util import get_data, glob_exists


def run(*argv):
    with patch.object(sys, 'argv', ['spanr'] + [str(a) for a in argv]):
        return main()


class TestGenome:
    def test_genome(self, capsys):
        assert run('genome', get_data('small.chr.sizes')) == EXIT_OK
        assert capsys.readouterr().out == '---\nI: 1-1000\nII: 1-2000\n'

    def test_full_genome(self, capsys):
        assert run('genome', get_data('S288c.chr.sizes')) == EXIT_OK
        stdout = capsys.readouterr().out
        assert 'I: 1-230218' in stdout
        assert len(stdout.splitlines()) == 17

    def test_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr('sys.stdin', io.StringIO('chrM\t85779\n'))
        assert run('genome', 'stdin') == EXIT_OK
        assert capsys.readouterr().out == '---\nchrM: 1-85779\n'

    def test_missing_file(self, capsys):
        assert run('genome', get_data('does_not_exist.sizes')) == EXIT_ERROR
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'does not match any files' in captured.err

    def test_outfile(self, tmp_path):
        output = tmp_path / 'genome.yml'
        assert run('genome', get_data('small.chr.sizes'), '-o', output) == EXIT_OK
        with open(output) as fh:
            assert yaml.safe_load(fh) == {'I': '1-1000', 'II': '1-2000'}


class TestSome:
    def test_some(self, capsys):
        assert run('some', get_data('Atha.yml'), get_data('Atha.list')) == EXIT_OK
        stdout = capsys.readouterr().out
        assert len(stdout.splitlines()) == 5
        assert 'AT2G01008' in stdout
        assert 'AT2G01021' not in stdout


class TestMergeSplit:
    def test_merge(self, capsys):
        assert run('merge', get_data('I.yml'), get_data('II.yml')) == EXIT_OK
        stdout = capsys.readouterr().out
        assert stdout == '---\nI:\n  I: 28547-29194\nII:\n  II: 21294-22075,23000-23100\n'

    def test_merge_glob(self, capsys):
        assert run('merge', get_data('{I,II}.yml')) == EXIT_OK
        assert len(capsys.readouterr().out.splitlines()) == 5

    def test_merge_grouped_input(self, capsys):
        assert run('merge', get_data('Atha.yml')) == EXIT_ERROR
        assert capsys.readouterr().out == ''

    def test_split(self, capsys):
        assert run('split', get_data('I.II.yml')) == EXIT_OK
        stdout = capsys.readouterr().out
        assert stdout == '---\nI: 28547-29194\n---\nII: 21294-22075,23000-23100\n'

    def test_split_to_directory(self, tmp_path, capsys):
        outdir = tmp_path / 'split'
        assert run('split', get_data('I.II.yml'), '-o', outdir) == EXIT_OK
        assert capsys.readouterr().out == ''
        assert sorted(os.listdir(outdir)) == ['I.yml', 'II.yml']
        with open(outdir / 'II.yml') as fh:
            assert yaml.safe_load(fh) == {'II': '21294-22075,23000-23100'}

    def test_split_suffix(self, tmp_path):
        assert run('split', get_data('I.II.yml'), '-o', tmp_path, '-s', '.yaml') == EXIT_OK
        assert glob_exists(str(tmp_path), '*.yaml', strict=True, n=2)
        assert sorted(os.listdir(tmp_path)) == ['I.yaml', 'II.yaml']

    def test_split_flat(self, tmp_path):
        outdir = tmp_path / 'split'
        assert run('split', get_data('I.yml'), '-o', outdir) == EXIT_ERROR
        assert not os.path.exists(outdir)


class TestStat:
    def test_stat(self, capsys):
        assert run('stat', get_data('small.chr.sizes'), get_data('intergenic.yml')) == EXIT_OK
        assert capsys.readouterr().out == (
            'chr,chrLength,size,coverage\n'
            'I,1000,200,0.2000\n'
            'II,2000,1000,0.5000\n'
            'all,3000,1200,0.4000\n'
        )

    def test_stat_full_genome(self, capsys):
        assert run('stat', get_data('S288c.chr.sizes'), get_data('intergenic.yml')) == EXIT_OK
        stdout = capsys.readouterr().out
        assert len(stdout.splitlines()) == 18
        assert 'all,12071326,1200,' in stdout

    def test_stat_all(self, capsys):
        assert run('stat', get_data('small.chr.sizes'), get_data('intergenic.yml'), '--all') == EXIT_OK
        stdout = capsys.readouterr().out
        assert stdout == 'chrLength,size,coverage\n3000,1200,0.4000\n'
        assert 'all' not in stdout

    def test_statop(self, capsys):
        assert run('statop', get_data('small.chr.sizes'), get_data('intergenic.yml'), get_data('repeat.yml')) == EXIT_OK
        stdout = capsys.readouterr().out
        assert stdout.splitlines()[0] == 'chr,chrLength,size,repeatLength,repeatSize,c1,c2,ratio'
        assert 'I,1000,200,200,100,0.2000,0.5000,2.5000' in stdout

    def test_statop_all(self, capsys):
        assert run(
            'statop', get_data('small.chr.sizes'), get_data('intergenic.yml'), get_data('repeat.yml'), '--all'
        ) == EXIT_OK
        stdout = capsys.readouterr().out
        assert len(stdout.splitlines()) == 2
        assert ',repeatLength,' in stdout
        assert '\nI,' not in stdout

    def test_statop_invalid(self, capsys):
        with pytest.raises(SystemExit) as err:
            run(
                'statop', get_data('small.chr.sizes'), get_data('intergenic.yml'), get_data('repeat.yml'),
                '--op', 'invalid', '--all'
            )
        assert err.value.code == 2
        assert 'Invalid IntSpan Op' in capsys.readouterr().err


class TestCombineCompare:
    def test_combine(self, capsys):
        assert run('combine', get_data('Atha.yml')) == EXIT_OK
        stdout = capsys.readouterr().out
        assert stdout == "---\n'1': 3631-3913,3996-4276\n'2': 1025-1272,1458-1510,6571-6672\n"

    def test_combine_flat(self, capsys):
        assert run('combine', get_data('II.yml')) == EXIT_OK
        assert capsys.readouterr().out == '---\nII: 21294-22075,23000-23100\n'

    def test_compare(self, capsys):
        assert run('compare', get_data('intergenic.yml'), get_data('repeat.yml'), '--op', 'intersect') == EXIT_OK
        assert capsys.readouterr().out == "---\nI: 51-100,201-250\nII: '-'\nIII: '-'\n"

    def test_compare_union_of_three(self, capsys):
        assert run(
            'compare', get_data('intergenic.yml'), get_data('repeat.yml'), get_data('I.yml'), '--op', 'union'
        ) == EXIT_OK
        stdout = capsys.readouterr().out
        assert 'I: 1-300,28547-29194\n' in stdout
        assert "'-'" not in stdout

    def test_compare_grouped(self, capsys):
        assert run('compare', get_data('I.II.yml'), get_data('repeat.yml')) == EXIT_OK
        document = yaml.safe_load(capsys.readouterr().out)
        assert sorted(document) == ['I', 'II']
        assert sorted(document['I']) == ['I', 'II', 'III']

    def test_compare_single_input(self):
        with pytest.raises(SystemExit) as err:
            run('compare', get_data('intergenic.yml'))
        assert err.value.code == 2

    def test_compare_mixed_document(self, capsys):
        assert run('compare', get_data('mixed.yml'), get_data('repeat.yml')) == EXIT_ERROR
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'ERROR' in captured.err


class TestSpan:
    def test_cover(self, capsys):
        assert run('span', get_data('brca2.yml'), '--op', 'cover') == EXIT_OK
        assert capsys.readouterr().out == "---\n'13': 100-2600\n"

    def test_fill(self, capsys):
        assert run('span', get_data('brca2.yml'), '--op', 'fill', '-n', '1000') == EXIT_OK
        assert capsys.readouterr().out == "---\n'13': 100-1300,2500-2600\n"

    def test_trim(self, capsys):
        assert run('span', get_data('brca2.yml'), '--op', 'trim', '-n', '30') == EXIT_OK
        assert capsys.readouterr().out == "---\n'13': 130-170,1030-1070,2530-2570\n"

    def test_pad(self, capsys):
        assert run('span', get_data('brca2.yml'), '--op', 'pad', '-n', '100') == EXIT_OK
        assert capsys.readouterr().out == "---\n'13': 0-300,900-1400,2400-2700\n"

    def test_excise(self, capsys):
        assert run('span', get_data('brca2.yml'), '--op', 'excise', '-n', '60') == EXIT_OK
        assert capsys.readouterr().out == "---\n'13': 100-200,1000-1100,2500-2600\n"

    def test_invalid(self, capsys):
        with pytest.raises(SystemExit):
            run('span', get_data('brca2.yml'), '--op', 'invalid')
        assert 'Invalid IntSpan Op' in capsys.readouterr().err


class TestCover:
    def test_cover(self, capsys):
        assert run('cover', get_data('S288c.ranges')) == EXIT_OK
        stdout = capsys.readouterr().out
        assert stdout == '---\nI: 1-150\nII: 21294-22075,30000\n'
        assert 'S288c' not in stdout

    def test_cover_c2(self, capsys):
        assert run('cover', get_data('S288c.ranges'), '-c', '2') == EXIT_OK
        assert capsys.readouterr().out == "---\nI: 90-100\nII: '-'\n"

    def test_cover_tabular(self, capsys):
        assert run('cover', get_data('tabular.ranges')) == EXIT_OK
        assert capsys.readouterr().out == '---\nI: 1-150\nII: 5-10\n'

    def test_cover_zero(self, capsys):
        assert run('cover', get_data('S288c.ranges'), '-c', '0') == EXIT_ERROR
        assert capsys.readouterr().out == ''


class TestGffConvert:
    def test_gff(self, capsys):
        assert run('gff', get_data('sample.gff')) == EXIT_OK
        assert capsys.readouterr().out == '---\nNC_007942: 1-152218\nNC_007943: 1-50\n'

    def test_gff_tag_then_merge(self, tmp_path, capsys):
        assert run('gff', get_data('sample.gff'), '--tag', 'CDS', '-o', tmp_path / 'cds.yml') == EXIT_OK
        assert run('gff', get_data('sample.gff'), '-o', tmp_path / 'all.yml') == EXIT_OK
        assert capsys.readouterr().out == ''
        assert run('merge', tmp_path / 'cds.yml', tmp_path / 'all.yml') == EXIT_OK
        document = yaml.safe_load(capsys.readouterr().out)
        assert document['cds'] == {'NC_007942': '100-500,1000-1200', 'NC_007943': '1-50'}
        assert document['all']['NC_007942'] == '1-152218'

    def test_convert(self, capsys):
        assert run('convert', get_data('repeat.yml')) == EXIT_OK
        assert capsys.readouterr().out == 'I:51-250\nIII:1-10\n'

    def test_convert_grouped(self, capsys):
        assert run('convert', get_data('I.II.yml')) == EXIT_OK
        assert capsys.readouterr().out == 'I.I:28547-29194\nII.II:21294-22075\nII.II:23000-23100\n'


class TestRange:
    def test_overlap(self, capsys):
        assert run('range', get_data('intergenic.yml'), get_data('S288c.ranges'), '--op', 'overlap') == EXIT_OK
        assert capsys.readouterr().out == 'S288c.I(+):1-100\nS288c.I(-):90-150\n'

    def test_non_overlap(self, capsys):
        assert run('range', get_data('intergenic.yml'), get_data('S288c.ranges'), '--op', 'non-overlap') == EXIT_OK
        assert capsys.readouterr().out == 'II:21294-22075\nII:30000\n'

    def test_superset(self, capsys):
        assert run('range', get_data('intergenic.yml'), get_data('S288c.ranges'), '--op', 'superset') == EXIT_OK
        assert capsys.readouterr().out == 'S288c.I(+):1-100\n'

    def test_invalid(self, capsys):
        with pytest.raises(SystemExit):
            run('range', get_data('intergenic.yml'), get_data('S288c.ranges'), '--op', 'invalid')
        assert 'Invalid Range Op' in capsys.readouterr().err


def test_log_file(tmp_path, capsys):
    log = tmp_path / 'spanr.log'
    assert run('convert', get_data('repeat.yml'), '--log', log) == EXIT_OK
    assert capsys.readouterr().err == ''
    with open(log) as fh:
        content = fh.read()
    assert 'spanr: ' in content
    assert 'run time (s)' in content
