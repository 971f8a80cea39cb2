#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
cortexgraph v0.1.0

Tests for CLI command interface.

Author: cortexgraph Development Team
License: MIT - See LICENSE
"""

import pytest
from click.testing import CliRunner
from cortexgraph.cli import main


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self):
        """Test that --help runs without error."""
        runner = CliRunner()
        result = runner.invoke(main, ['--help'])

        assert result.exit_code == 0
        assert 'cortexgraph' in result.output

    def test_cli_version(self):
        """Test that --version displays version."""
        runner = CliRunner()
        result = runner.invoke(main, ['--version'])

        assert result.exit_code == 0
        assert '0.1.0' in result.output

    def test_invalid_command(self):
        """Test that invalid commands are handled gracefully."""
        runner = CliRunner()
        result = runner.invoke(main, ['nonexistent_command'])

        assert result.exit_code != 0


class TestHeaderCommand:
    """Test the header command."""

    def test_header_summary(self, three_colour_ctx):
        runner = CliRunner()
        result = runner.invoke(main, ['header', str(three_colour_ctx)])

        assert result.exit_code == 0
        assert 'KmerSize:          21' in result.output
        assert 'Number of colours: 3' in result.output
        assert 'Kmer records:      5' in result.output

    def test_header_bad_magic(self, corrupt_ctx):
        path = corrupt_ctx(offset=0, replacement=b"XXXXXX")
        runner = CliRunner()
        result = runner.invoke(main, ['header', str(path)])

        assert result.exit_code == 1
        assert 'Invalid Cortex binary' in result.output

    def test_header_missing_file(self):
        runner = CliRunner()
        result = runner.invoke(main, ['header', 'nonexistent.ctx'])

        assert result.exit_code != 0


class TestKmersCommand:
    """Test the kmers command."""

    def test_list_kmers(self, three_colour_ctx):
        runner = CliRunner()
        result = runner.invoke(main, ['kmers', str(three_colour_ctx)])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "AAAAAAAAAAAAAAAAAAAAC"
        assert lines[4] == "TTTTTTTTTTTTTTTTTTTTT"
        assert len(lines) == 5

    def test_limit_and_reverse(self, three_colour_ctx):
        runner = CliRunner()
        result = runner.invoke(main, ['kmers', str(three_colour_ctx), '--reverse', '-n', '2'])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "CAAAAAAAAAAAAAAAAAAAA",
            "ATGCATGCATGCATGCATGCA",
        ]

    def test_coverage_and_neighbours(self, three_colour_ctx):
        runner = CliRunner()
        result = runner.invoke(main, ['kmers', str(three_colour_ctx), '--coverage', '--neighbors', '-n', '1'])

        assert result.exit_code == 0
        assert result.output.splitlines()[0].split('\t') == [
            "AAAAAAAAAAAAAAAAAAAAC",
            "1,0,2",
            "AAAAAAAAAAAAAAAAAAAAA",
            "AAAAAAAAAAAAAAAAAAACT",
        ]

    def test_threaded_config(self, three_colour_ctx, temp_output_dir):
        config_path = temp_output_dir / "threaded.yaml"
        config_path.write_text("reader:\n  threaded: true\n  prefetch_queue_size: 1\n")

        runner = CliRunner()
        result = runner.invoke(main, ['-c', str(config_path), 'kmers', str(three_colour_ctx), '-n', '3'])

        assert result.exit_code == 0
        assert len(result.output.splitlines()) == 3

    def test_truncated_records(self, corrupt_ctx, three_colour_header_size):
        path = corrupt_ctx(truncate=three_colour_header_size + 23 + 12)
        runner = CliRunner()
        result = runner.invoke(main, ['kmers', str(path)])

        assert result.exit_code == 1
        assert 'Corrupt record' in result.output


    def test_neighbour_colour_out_of_range(self, three_colour_ctx, temp_output_dir):
        config_path = temp_output_dir / "colours.yaml"
        config_path.write_text("neighbors:\n  colours: [7]\n")

        runner = CliRunner()
        result = runner.invoke(main, ['-c', str(config_path), 'kmers', str(three_colour_ctx), '--neighbors'])

        assert result.exit_code == 1
        assert 'out of range' in result.output
        assert not isinstance(result.exception, IndexError)


class TestNeighborsCommand:
    """Test the neighbors command."""

    def test_neighbours_of_kmer(self, three_colour_ctx):
        runner = CliRunner()
        result = runner.invoke(main, ['neighbors', str(three_colour_ctx), 'C' * 21])

        assert result.exit_code == 0
        assert 'left:  CCCCCCCCCCCCCCCCCCCCC' in result.output
        assert 'right: CCCCCCCCCCCCCCCCCCCCG' in result.output

    def test_no_neighbours(self, three_colour_ctx):
        runner = CliRunner()
        result = runner.invoke(main, ['neighbors', str(three_colour_ctx), 'T' * 21])

        assert result.exit_code == 0
        assert 'left:  -' in result.output
        assert 'right: -' in result.output

    def test_kmer_not_found(self, three_colour_ctx):
        runner = CliRunner()
        result = runner.invoke(main, ['neighbors', str(three_colour_ctx), 'G' * 21])

        assert result.exit_code == 1
        assert 'not found' in result.output

    @pytest.mark.parametrize("query", ["C" * 20, "N" * 21])
    def test_bad_query(self, three_colour_ctx, query):
        runner = CliRunner()
        result = runner.invoke(main, ['neighbors', str(three_colour_ctx), query])

        assert result.exit_code == 1


    def test_neighbour_colour_out_of_range(self, three_colour_ctx, temp_output_dir):
        config_path = temp_output_dir / "colours.yaml"
        config_path.write_text("neighbors:\n  colours: [0, 3]\n")

        runner = CliRunner()
        result = runner.invoke(main, ['-c', str(config_path), 'neighbors', str(three_colour_ctx), 'C' * 21])

        assert result.exit_code == 1
        assert 'out of range' in result.output

    def test_selected_colours(self, three_colour_ctx, temp_output_dir):
        config_path = temp_output_dir / "colours.yaml"
        config_path.write_text("neighbors:\n  colours: [0, 2]\n")

        runner = CliRunner()
        result = runner.invoke(main, ['-c', str(config_path), 'neighbors', str(three_colour_ctx), 'C' * 21])

        assert result.exit_code == 0
        assert 'left:  -' in result.output


class TestConfigCommands:
    """Test configuration management commands."""

    def test_config_init_command(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            result = runner.invoke(main, ['config', 'init', '--output', 'test_config.yaml'])

            assert result.exit_code == 0
            assert 'Configuration file created' in result.output

    def test_config_validate(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            runner.invoke(main, ['config', 'init', '-o', 'cfg.yaml'])
            result = runner.invoke(main, ['config', 'validate', 'cfg.yaml'])

            assert result.exit_code == 0
            assert 'Configuration is valid' in result.output

    def test_config_validate_invalid(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            with open('bad.yaml', 'w') as f:
                f.write("logging:\n  level: LOUD\n")
            result = runner.invoke(main, ['config', 'validate', 'bad.yaml'])

            assert result.exit_code == 1

    def test_invalid_global_config(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            with open('bad.yaml', 'w') as f:
                f.write("reader:\n  prefetch_queue_size: 0\n")
            result = runner.invoke(main, ['-c', 'bad.yaml', 'config', 'init'])

            assert result.exit_code != 0

    def test_config_show(self):
        runner = CliRunner()

        with runner.isolated_filesystem():
            with open('cfg.yaml', 'w') as f:
                f.write("reader:\n  threaded: true\n")
            result = runner.invoke(main, ['config', 'show', 'cfg.yaml'])

            assert result.exit_code == 0
            assert 'threaded: true' in result.output
            assert 'max_name_length: 10000' in result.output
