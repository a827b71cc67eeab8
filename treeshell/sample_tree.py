#!/usr/bin/env python3
"""
The bundled teaching filesystem.

A small POSIX-looking tree with a populated home directory. Contents are
chosen so the classic exercises (head of a thesis chapter, counting CSV
rows, grepping a log, cutting TSV columns) have deterministic answers.
"""

from .vfs import Mode, VirtualFileSystem

HOME = '/home/user'

README = """Welcome to the Filesystem Visualizer!

This sandbox is a read-only virtual filesystem for practising the shell.
Try these commands:
  pwd              print the current directory
  ls -a            list everything, including hidden files
  cd Documents     move into a directory
  cat README.txt   show a file
Nothing you type here can change or damage the filesystem."""

CHAPTER1 = """# Chapter 1: Introduction

Command-line tools remain the most direct way to explore data.
This thesis studies how newcomers learn to navigate a filesystem.

## 1.1 Motivation

Graphical file browsers hide the structure of paths.
Learners who type paths build a clearer mental model.

## 1.2 Contributions

We present an interactive visualizer paired with a simulated shell."""

CHAPTER2 = """# Chapter 2: Methods

Participants completed a series of short navigation missions.
Each mission required one or more shell commands.

## 2.1 Procedure

The study followed two phases:
1. Data collection
2. Analysis"""

MEETING = """Meeting notes - 2024-02-14
Attendees: Laura, Sam, Priya
- Review chapter 2 draft
- Decide on figures for the results section
Action: Laura to share the pipeline logs"""

FASTA = """>seq1 Homo sapiens mitochondrion fragment
GATCACAGGTCTATCACCCTATTAACCACTCACGGGAGCTCTCCATGC
>seq2 Mus musculus mitochondrion fragment
GTTAATGTAGCTTAATAACAAAGCAAAGCACTGAAAATGCTTAGATGG
>seq3 Danio rerio mitochondrion fragment
GCTAGCGTAGCTTAACTAAAGCATAACACTGAAGATGTTAAGATGGGC"""

SAMPLE_METADATA = """sample_id\tcondition\treplicate\tread_count
s1\tcontrol\t1\t1520334
s2\tcontrol\t2\t1498211
s3\ttreated\t1\t1610245
s4\ttreated\t2\t1587730"""

PIPELINE_LOG = """2024-03-01 08:00:01 INFO Pipeline started
2024-03-01 08:00:05 INFO Loading samples from sample_metadata.tsv
2024-03-01 08:02:11 WARNING Low coverage in sample s2
2024-03-01 08:04:37 ERROR Failed to align sample s3: reference index missing
2024-03-01 08:04:38 WARNING Retrying alignment for s3
2024-03-01 08:06:52 WARNING Duplicate reads above threshold in s1
2024-03-01 08:09:14 ERROR Variant calling aborted for s3
2024-03-01 08:09:15 WARNING Skipping report for s3
2024-03-01 08:10:02 WARNING Disk usage above 80 percent
2024-03-01 08:10:30 INFO Pipeline finished with 2 failed steps"""

EXPENSES = """date,category,description,amount
2024-01-03,groceries,Weekly shopping,54.20
2024-01-05,transport,Train ticket,12.50
2024-01-09,utilities,Electricity bill,78.00
2024-01-12,groceries,Farmers market,23.75"""

GENE_ANNOTATIONS = """gene_id\tsymbol\tdescription
gene001\tMAPK1\tmitogen-activated protein kinase 1
gene002\tCDK2\tcyclin-dependent Kinase 2
gene003\tTP53\ttumor protein p53
gene004\tACTB\tactin beta
gene017\tGAPDH\tglyceraldehyde-3-phosphate dehydrogenase
gene023\tEGFR\tepidermal growth factor receptor
gene041\tAKT1\tAKT serine/threonine KINASE 1
gene052\tBRCA1\tBRCA1 DNA repair associated"""

INSTALLER = """#!/bin/sh
echo "Installing demo tools..."
mkdir -p "$HOME/.local/bin"
echo Done"""

INDEX_HTML = """<!DOCTYPE html>
<html>
  <head><title>Demo webapp</title></head>
  <body><div id="root"></div></body>
</html>"""

ABOUT_HTML = """<!DOCTYPE html>
<html>
  <body><h1>About</h1></body>
</html>"""

APP_TSX = """import React from "react";

export default function App() {
  return <h1>Hello from the webapp</h1>;
}"""

DATA_CSV = """id,value
1,0.42
2,0.37
3,0.51"""

BASHRC = """# ~/.bashrc
export PATH="$HOME/bin:$PATH"
alias ll='ls -l'"""

PROFILE = """# ~/.profile
if [ -f "$HOME/.bashrc" ]; then
  . "$HOME/.bashrc"
fi"""

HOSTS = """127.0.0.1\tlocalhost
::1\tlocalhost ip6-localhost"""

PASSWD = """root:x:0:0:root:/root:/bin/bash
user:x:1000:1000:Default User:/home/user:/bin/bash"""

NGINX_CONF = """server {
    listen 80;
    root /home/user/Projects/webapp;
}"""

SYSLOG = """Mar  1 07:59:58 demo kernel: boot complete
Mar  1 08:00:00 demo cron[211]: session opened for user
Mar  1 08:10:31 demo cron[211]: session closed for user"""


def _dir(name, *children, **extra):
    spec = {'name': name, 'type': 'dir', 'children': list(children)}
    spec.update(extra)
    return spec


def _file(name, content=None, **extra):
    spec = {'name': name, 'type': 'file'}
    if content is not None:
        spec['content'] = content
    spec.update(extra)
    return spec


def _binary(name, size):
    return _file(name, size=size, mode=Mode.EXEC_DEFAULT & 0o7777)


def sample_tree_spec() -> dict:
    """Nested specification of the bundled tree."""
    return _dir(
        '',
        _dir('bin',
             _binary('bash', 1183448),
             _binary('ls', 138208),
             _binary('cat', 35280),
             _binary('echo', 35120)),
        _dir('etc',
             _file('hosts', HOSTS),
             _file('passwd', PASSWD),
             _dir('nginx', _file('nginx.conf', NGINX_CONF))),
        _dir('usr',
             _dir('bin',
                  _binary('python', 5904904),
                  _binary('node', 96325632)),
             _dir('share', _dir('man'))),
        _dir('var',
             _dir('log', _file('syslog', SYSLOG)),
             _dir('tmp')),
        _dir('tmp'),
        _dir('home',
             _dir('user',
                  _dir('Documents',
                       _dir('Thesis',
                            _file('chapter1.md', CHAPTER1),
                            _file('chapter2.md', CHAPTER2)),
                       _dir('Notes', _file('meeting.txt', MEETING)),
                       _dir('Research',
                            _file('example.fasta', FASTA),
                            _file('sample_metadata.tsv', SAMPLE_METADATA),
                            _file('pipeline.log', PIPELINE_LOG))),
                  _dir('Projects',
                       _dir('webapp',
                            _file('index.html', INDEX_HTML),
                            _file('about.html', ABOUT_HTML),
                            _file('app.tsx', APP_TSX)),
                       _dir('analysis', _file('data.csv', DATA_CSV))),
                  _dir('Examples', _file('expenses.csv', EXPENSES)),
                  _dir('Pictures', _file('vacation.jpg', size=2457600)),
                  _dir('Downloads',
                       _file('installer.sh', INSTALLER, mode=0o755),
                       _file('gene_annotations.tsv', GENE_ANNOTATIONS)),
                  _dir('Music'),
                  _dir('Videos'),
                  _file('.bashrc', BASHRC),
                  _file('.profile', PROFILE),
                  _file('README.txt', README))),
    )


def build_sample_filesystem() -> VirtualFileSystem:
    """Construct the bundled teaching filesystem."""
    return VirtualFileSystem.from_dict(sample_tree_spec())
