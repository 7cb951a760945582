#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for ContigWeaver.

This module provides the main CLI entry point and all subcommands: assembly,
scaffolding, coverage, consensus, read trimming and correction, assembly
statistics and configuration management.
"""

import sys
import logging
from pathlib import Path

import click
import yaml

from .version import __version__
from .config.schema import TEMPLATES, load_config, save_config_template, validate_config
from .config.parser import ConfigParser
from .errors import ContigWeaverError
from .utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def _fail(message: str):
    click.echo(f"✗ Error: {message}", err=True)
    sys.exit(1)


def _progress_callback(bar):
    """Adapt a click progress bar (0-1000) to a fraction callback."""
    state = {'shown': 0}
    
    def callback(fraction: float):
        target = int(fraction * 1000)
        if target > state['shown']:
            bar.update(target - state['shown'])
            state['shown'] = target
    
    return callback


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.option('--log-file', type=click.Path(), default=None, help='Also write the log to this file')
@click.pass_context
def main(ctx, verbose, quiet, log_file):
    """
    ContigWeaver: overlap and de Bruijn graph contig assembler
    
    Assembles contigs from short reads, joins them into scaffolds from
    external links, and reports coverage, consensus and contiguity metrics.
    """
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet
    ctx.obj['LOG_FILE'] = log_file
    
    level = 'DEBUG' if verbose else 'WARNING' if quiet else 'INFO'
    setup_logging(level=level, log_file=log_file)


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='contigweaver_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t', type=click.Choice(list(TEMPLATES)),
              default='default', help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")
    
    try:
        save_config_template(Path(output), template=template)
    except (OSError, ValueError) as e:
        _fail(f"creating configuration: {e}")
    
    click.echo(f"✓ Configuration file created: {output}")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")
    
    try:
        config = load_config(Path(config_file))
    except yaml.YAMLError as e:
        _fail(f"invalid YAML: {e}")
    
    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:", err=True)
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)
    
    click.echo("✓ Configuration is valid")
    click.echo("\nKey Settings:")
    click.echo(f"  Method: {config['assembly']['method']}")
    click.echo(f"  Min overlap: {config['assembly']['min_overlap']}")
    click.echo(f"  K-mer size: {config['assembly']['kmer_size']}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = load_config(Path(config_file))
    except yaml.YAMLError as e:
        _fail(f"invalid YAML: {e}")
    
    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return
    
    assembly = config['assembly']
    preprocessing = config['preprocessing']
    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)
    click.echo("\nAssembly:")
    click.echo(f"  Method: {assembly['method']}")
    click.echo(f"  Min overlap: {assembly['min_overlap']} bp")
    click.echo(f"  Min identity: {assembly['min_identity']}")
    click.echo(f"  K-mer size: {assembly['kmer_size']}")
    click.echo(f"  Min contig length: {assembly['min_contig_length']} bp")
    click.echo(f"  Overlap threads: {config['overlap']['threads']}")
    click.echo("\nPreprocessing:")
    click.echo(f"  Quality trimming: {preprocessing['trim']['enabled']}")
    click.echo(f"  K-mer correction: {preprocessing['correction']['enabled']}")
    click.echo("\nOutput:")
    click.echo(f"  Log level: {config['output']['logging']['level']}")


# ============================================================================
# Assembly
# ============================================================================

@main.command()
@click.option('--reads', '-r', 'reads_file', type=click.Path(exists=True), required=True,
              help='Input reads (FASTA/FASTQ, optionally gzipped)')
@click.option('--output', '-o', type=click.Path(), required=True, help='Output directory')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True), default=None,
              help='YAML configuration file')
@click.option('--method', '-m', type=click.Choice(['olc', 'dbg']), default=None,
              help='Assembly method (overrides config)')
@click.option('--min-overlap', type=int, default=None, help='Minimum overlap length (bp)')
@click.option('--min-identity', type=float, default=None, help='Minimum overlap identity (0-1)')
@click.option('--kmer-size', '-k', type=int, default=None, help='De Bruijn k-mer size')
@click.option('--min-contig-length', type=int, default=None, help='Minimum contig length (bp)')
@click.option('--threads', '-t', type=int, default=None, help='Overlap detection threads')
@click.option('--trim/--no-trim', default=None, help='Quality-trim FASTQ reads first')
@click.option('--correct/--no-correct', default=None, help='K-mer correct reads first')
@click.option('--set', 'overrides', multiple=True, metavar='KEY=VALUE',
              help='Override any config value, e.g. --set assembly.kmer_size=21')
@click.pass_context
def assemble(ctx, reads_file, output, config_file, method, min_overlap, min_identity,
             kmer_size, min_contig_length, threads, trim, correct, overrides):
    """Assemble reads into contigs (OLC or de Bruijn graph)."""
    from .assembly_core.assembler import assemble as run_assembly
    from .assembly_utils.assembly_stats import calculate_statistics
    from .io_utils.io_core import read_sequences, sequences_to_reads, write_fasta
    from .preprocessing.read_correction import ErrorCorrector, quality_trim_reads
    
    try:
        parser = ConfigParser(config_file)
        cli_values = {
            'assembly.method': method,
            'assembly.min_overlap': min_overlap,
            'assembly.min_identity': min_identity,
            'assembly.kmer_size': kmer_size,
            'assembly.min_contig_length': min_contig_length,
            'overlap.threads': threads,
            'preprocessing.trim.enabled': trim,
            'preprocessing.correction.enabled': correct,
        }
        parser.merge_cli_overrides({k: v for k, v in cli_values.items() if v is not None})
        parser.merge_cli_overrides(ConfigParser.parse_overrides(overrides))
        parser.validate()
        parameters = parser.get_assembly_parameters()
    except ContigWeaverError as e:
        _fail(str(e))
    
    quiet = ctx.obj.get('QUIET', False)
    if not quiet and not ctx.obj.get('VERBOSE', False):
        # -v/-q on the command line win over the config file
        setup_logging(level=parser.get('output.logging.level', 'INFO'),
                      log_file=ctx.obj.get('LOG_FILE') or parser.get('output.logging.log_file'))
    
    output_dir = Path(output)
    output_dir.mkdir(parents=True, exist_ok=True)
    
    try:
        records = read_sequences(reads_file)
        sequences = [record.sequence for record in records]
        
        if parser.get('preprocessing.trim.enabled'):
            if any(record.quality is None for record in records):
                logger.warning("Quality trimming skipped: reads carry no base qualities")
            else:
                sequences = quality_trim_reads(
                    [(record.sequence, record.quality) for record in records],
                    min_quality=parser.get('preprocessing.trim.min_quality'),
                    min_length=parser.get('preprocessing.trim.min_length'),
                )
        
        if parser.get('preprocessing.correction.enabled'):
            corrector = ErrorCorrector(
                k_size=parser.get('preprocessing.correction.kmer_size'),
                min_kmer_freq=parser.get('preprocessing.correction.min_kmer_frequency'),
            )
            sequences, correction_stats = corrector.correct_reads(sequences)
            if not quiet:
                click.echo(correction_stats.summary())
        
        method = parser.get('assembly.method')
        if not quiet:
            click.echo(f"Assembling {len(sequences):,} reads ({method.upper()})...")
        
        if method == 'olc':
            with click.progressbar(length=1000, label="Overlaps", hidden=quiet) as bar:
                result = run_assembly(
                    sequences, parameters, method='olc',
                    progress=_progress_callback(bar),
                    num_threads=parser.get('overlap.threads'),
                    check_interval=parser.get('overlap.check_interval'),
                )
        else:
            result = run_assembly(sequences, parameters, method='dbg')
    except (ContigWeaverError, ValueError, FileNotFoundError) as e:
        _fail(str(e))
    
    contigs_path = output_dir / parser.get('output.contigs_file')
    stats_path = output_dir / parser.get('output.stats_file')
    write_fasta(sequences_to_reads(result.contigs), contigs_path,
                line_width=parser.get('output.line_width'))
    
    named = [(f"contig_{n}", seq) for n, seq in enumerate(result.contigs, start=1)]
    report = {
        'assembly': result.to_dict(),
        'statistics': calculate_statistics(named).to_dict(),
        'parameters': parameters.to_dict(),
        'method': method,
    }
    with open(stats_path, 'w') as f:
        yaml.dump(report, f, default_flow_style=False, sort_keys=False)
    
    if not quiet:
        click.echo(f"✓ {result.num_contigs} contigs, {result.total_length:,} bp, "
                   f"N50={result.n50:,}, longest={result.longest_contig:,} bp")
        click.echo(f"  Contigs: {contigs_path}")
        click.echo(f"  Report:  {stats_path}")


# ============================================================================
# Scaffolding
# ============================================================================

@main.command()
@click.option('--contigs', '-c', 'contigs_file', type=click.Path(exists=True), required=True,
              help='Contigs FASTA')
@click.option('--links', '-l', 'links_file', type=click.Path(exists=True), required=True,
              help='Link table: contig1<TAB>contig2<TAB>gap (names or 0-based indexes)')
@click.option('--output', '-o', type=click.Path(), required=True, help='Output scaffolds FASTA')
@click.option('--config', 'config_file', type=click.Path(exists=True), default=None,
              help='YAML configuration file (scaffolding section)')
@click.option('--gap-character', default=None,
              help='Gap filler symbol (overrides config, default N)')
def scaffold(contigs_file, links_file, output, config_file, gap_character):
    """Join contigs into scaffolds using external links."""
    from .assembly_core.scaffolder_module import Scaffolder
    from .io_utils.io_core import read_fasta, read_links_tsv, sequences_to_reads, write_fasta
    
    try:
        parser = ConfigParser(config_file)
        if gap_character is not None:
            parser.merge_cli_overrides({'scaffolding.gap_character': gap_character})
        parser.validate()
    except ContigWeaverError as e:
        _fail(str(e))
    
    try:
        contigs = list(read_fasta(contigs_file))
        links = read_links_tsv(links_file, {c.id: i for i, c in enumerate(contigs)})
        scaffolder = Scaffolder(gap_character=parser.get('scaffolding.gap_character'))
        scaffolds = scaffolder.scaffold([c.sequence for c in contigs], links)
    except (ValueError, FileNotFoundError) as e:
        _fail(str(e))
    
    write_fasta(sequences_to_reads(scaffolds, prefix='scaffold'), output)
    click.echo(f"✓ {len(contigs)} contigs -> {len(scaffolds)} scaffolds "
               f"({scaffolder.stats['joins']} joins): {output}")


# ============================================================================
# Coverage / Consensus
# ============================================================================

@main.command()
@click.option('--reference', '-R', type=click.Path(exists=True), required=True,
              help='Reference/contig FASTA (first record is used)')
@click.option('--reads', '-r', 'reads_file', type=click.Path(exists=True), required=True,
              help='Reads (FASTA/FASTQ)')
@click.option('--min-overlap', type=int, default=None,
              help='Minimum matching bases to place a read (overrides config, default 20)')
@click.option('--output', '-o', type=click.Path(), default=None,
              help='Write per-base depth as TSV (position, depth)')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True), default=None,
              help='YAML configuration file (coverage section)')
def coverage(reference, reads_file, min_overlap, output, config_file):
    """Per-base coverage of reads placed on a reference."""
    from .assembly_utils.coverage_consensus import calculate_coverage, coverage_summary
    from .io_utils.io_core import read_fasta, read_sequences
    
    try:
        parser = ConfigParser(config_file)
        if min_overlap is not None:
            parser.merge_cli_overrides({'coverage.min_overlap': min_overlap})
        parser.validate()
    except ContigWeaverError as e:
        _fail(str(e))
    
    try:
        ref_record = next(iter(read_fasta(reference)), None)
        if ref_record is None:
            _fail(f"no sequences in {reference}")
        reads = [r.sequence for r in read_sequences(reads_file)]
        depth = calculate_coverage(ref_record.sequence, reads,
                                   min_overlap=parser.get('coverage.min_overlap'))
    except (ValueError, FileNotFoundError) as e:
        _fail(str(e))
    
    summary = coverage_summary(depth)
    if output:
        with open(output, 'w') as f:
            f.write("position\tdepth\n")
            for position, value in enumerate(depth.tolist()):
                f.write(f"{position}\t{value}\n")
    
    click.echo(f"Reference: {ref_record.id} ({summary.length:,} bp)")
    click.echo(f"  Mean depth: {summary.mean_depth:.2f}x")
    click.echo(f"  Max depth: {summary.max_depth}")
    click.echo(f"  Breadth: {summary.breadth * 100:.2f}%")
    click.echo(f"  Uncovered bases: {summary.zero_coverage_bases:,}")


@main.command()
@click.option('--aligned', '-a', type=click.Path(exists=True), required=True,
              help='FASTA of pre-aligned reads (equal length, gaps as -)')
@click.option('--output', '-o', type=click.Path(), default=None, help='Output consensus FASTA')
@click.option('--name', default='consensus', show_default=True, help='Consensus record id')
def consensus(aligned, output, name):
    """Column-wise majority consensus of aligned reads."""
    from .assembly_utils.coverage_consensus import compute_consensus
    from .io_utils.io_core import SeqRead, read_fasta, write_fasta
    
    try:
        reads = [r.sequence for r in read_fasta(aligned)]
    except (ValueError, FileNotFoundError) as e:
        _fail(str(e))
    
    result = compute_consensus(reads)
    if output:
        write_fasta([SeqRead(id=name, sequence=result)], output)
        click.echo(f"✓ Consensus of {len(reads)} reads ({len(result)} bp): {output}")
    else:
        click.echo(f">{name}\n{result}")


# ============================================================================
# Read Preprocessing
# ============================================================================

@main.command()
@click.option('--input', '-i', 'input_file', type=click.Path(exists=True), required=True,
              help='Input FASTQ')
@click.option('--output', '-o', type=click.Path(), required=True, help='Output FASTQ')
@click.option('--min-quality', type=int, default=20, show_default=True,
              help='Trim bases below this Phred score from both ends')
@click.option('--min-length', type=int, default=50, show_default=True,
              help='Discard reads shorter than this after trimming')
def trim(input_file, output, min_quality, min_length):
    """Quality-trim FASTQ reads."""
    from .io_utils.io_core import SeqRead, read_fastq, write_fastq
    from .preprocessing.read_correction import iter_trimmed_spans
    
    try:
        reads = list(read_fastq(input_file))
        spans = iter_trimmed_spans(((r.sequence, r.quality or '') for r in reads),
                                   min_quality=min_quality, min_length=min_length)
        kept = [SeqRead(id=reads[n].id, sequence=reads[n].sequence[start:end],
                        quality=reads[n].quality[start:end])
                for n, start, end in spans]
    except (ValueError, FileNotFoundError) as e:
        _fail(str(e))
    
    write_fastq(kept, output)
    click.echo(f"✓ Kept {len(kept):,}/{len(reads):,} reads: {output}")


@main.command()
@click.option('--input', '-i', 'input_file', type=click.Path(exists=True), required=True,
              help='Input reads (FASTA/FASTQ)')
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Output reads (format follows the extension)')
@click.option('--kmer-size', '-k', type=int, default=21, show_default=True, help='K-mer size')
@click.option('--min-kmer-frequency', type=int, default=3, show_default=True,
              help='Count at which a k-mer is trusted')
@click.pass_context
def correct(ctx, input_file, output, kmer_size, min_kmer_frequency):
    """K-mer spectrum error correction."""
    from .io_utils.io_core import SeqRead, detect_format, read_sequences, write_fasta, write_fastq
    from .preprocessing.read_correction import ErrorCorrector
    
    try:
        records = read_sequences(input_file)
        corrector = ErrorCorrector(k_size=kmer_size, min_kmer_freq=min_kmer_frequency)
        corrected, stats = corrector.correct_reads([r.sequence for r in records])
        out_format = detect_format(output)
    except (ValueError, FileNotFoundError) as e:
        _fail(str(e))
    
    out_reads = [SeqRead(id=r.id, sequence=seq, quality=r.quality)
                 for r, seq in zip(records, corrected)]
    if out_format == 'fastq':
        write_fastq(out_reads, output)
    else:
        write_fasta(out_reads, output)
    
    if not ctx.obj.get('QUIET', False):
        click.echo(stats.summary())
    click.echo(f"✓ Corrected reads: {output}")


# ============================================================================
# Statistics
# ============================================================================

@main.command()
@click.argument('fasta', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['summary', 'yaml']), default='summary',
              help='Output format')
@click.option('--nx-curve', is_flag=True, help='Also report N10..N90')
@click.option('--min-gap', type=int, default=10, show_default=True,
              help='Minimum N-run length reported as a scaffold gap')
def stats(fasta, format, nx_curve, min_gap):
    """Contiguity and gap statistics of an assembly FASTA."""
    from .assembly_utils.assembly_stats import (
        analyze_gap_distribution, calculate_aun, calculate_nx_curve,
        calculate_statistics, find_gaps,
    )
    from .io_utils.io_core import read_fasta
    
    try:
        sequences = [(r.id, r.sequence) for r in read_fasta(fasta)]
    except (ValueError, FileNotFoundError) as e:
        _fail(str(e))
    
    summary = calculate_statistics(sequences)
    lengths = [len(seq) for _, seq in sequences]
    gaps = analyze_gap_distribution(find_gaps(sequences, min_gap_length=min_gap))
    report = summary.to_dict()
    report['aun'] = round(calculate_aun(lengths), 2)
    report['gap_distribution'] = gaps
    if nx_curve:
        report['nx_curve'] = {f"N{nx.threshold}": nx.nx for nx in calculate_nx_curve(lengths)}
    
    if format == 'yaml':
        click.echo(yaml.dump(report, default_flow_style=False, sort_keys=False))
        return
    
    click.echo(f"Assembly statistics: {fasta}")
    click.echo("=" * 60)
    click.echo(f"  Sequences:      {summary.total_sequences:,}")
    click.echo(f"  Total length:   {summary.total_length:,} bp")
    click.echo(f"  Without gaps:   {summary.total_length_no_gaps:,} bp")
    click.echo(f"  N50 / L50:      {summary.n50:,} / {summary.l50:,}")
    click.echo(f"  N90 / L90:      {summary.n90:,} / {summary.l90:,}")
    click.echo(f"  auN:            {report['aun']:,}")
    click.echo(f"  Largest:        {summary.largest:,} bp")
    click.echo(f"  GC content:     {summary.gc_content * 100:.2f}%")
    click.echo(f"  Gaps:           {summary.total_gaps:,} ({summary.gap_percentage:.2f}% of bases)")
    if nx_curve:
        for key, value in report['nx_curve'].items():
            click.echo(f"  {key}: {value:,}")


if __name__ == '__main__':
    sys.exit(main())
