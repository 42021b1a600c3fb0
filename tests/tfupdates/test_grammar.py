"""Tests for the declaration matchers."""

from __future__ import annotations

from tfupdates.engines.update_checker.grammar import (
    MODULE_PATTERN,
    ModuleDeclaration,
    ProviderDeclaration,
    find_required_providers,
    find_terraform_block,
    iter_module_blocks,
    strip_comments,
)

TERRAFORM_BLOCK = """
terraform {
  backend "s3" {
    bucket = "state"
  }

  required_version = "~> 1.5.0"

  required_providers {
    aws = {
      source  = "hashicorp/aws"
      version = "5.0.0"
    }
    github = {
      version = ">= 5.20.0"
      source  = "integrations/github"
    }
    random = {
      source = "hashicorp/random"
    }
  }
}
"""

MODULES = """
module "vpc" {
  source = "git@github.com:hashicorp/terraform-aws-vpc.git?ref=v2.0.0"
  cidr   = "10.0.0.0/16"
}

module "local" {
  source = "./modules/local"
}

module "eks" {
  name   = "cluster"
  source = "https://github.example.com/platform/terraform-eks.git?ref=1.4.0"
}
"""


# ── terraform block ──────────────────────────────────────────────────────


class TestTerraformBlock:
    def test_captures_raw_constraint(self):
        decl = find_terraform_block(TERRAFORM_BLOCK)
        assert decl is not None
        assert decl.ref_version == "~> 1.5.0"

    def test_single_line(self):
        decl = find_terraform_block('terraform { required_version = ">= 1.3.0" }')
        assert decl.ref_version == ">= 1.3.0"

    def test_no_required_version(self):
        assert find_terraform_block('terraform {\n  backend "local" {}\n}\n') is None

    def test_empty_text(self):
        assert find_terraform_block("") is None

    def test_keyword_inside_other_word_ignored(self):
        text = 'resource "x" "y" { name = "myterraform" }'
        assert find_terraform_block(text) is None


# ── required_providers ───────────────────────────────────────────────────


class TestRequiredProviders:
    def test_entries_in_order(self):
        providers = find_required_providers(TERRAFORM_BLOCK)
        assert [p.alias for p in providers] == ["aws", "github", "random"]

    def test_source_and_version(self):
        aws = find_required_providers(TERRAFORM_BLOCK)[0]
        assert aws == ProviderDeclaration(
            alias="aws", owner="hashicorp", name="aws", version="5.0.0"
        )

    def test_keys_in_either_order(self):
        github = find_required_providers(TERRAFORM_BLOCK)[1]
        assert github.owner == "integrations"
        assert github.name == "github"
        assert github.version == ">= 5.20.0"

    def test_missing_version(self):
        random = find_required_providers(TERRAFORM_BLOCK)[2]
        assert random.version is None
        assert random.owner == "hashicorp"

    def test_missing_source(self):
        text = 'required_providers {\n  aws = {\n    version = "4.0.0"\n  }\n}\n'
        (aws,) = find_required_providers(text)
        assert aws.owner is None
        assert aws.name is None
        assert aws.version == "4.0.0"

    def test_registry_host_prefix_dropped(self):
        text = 'required_providers {\n  aws = { source = "registry.terraform.io/hashicorp/aws" }\n}\n'
        (aws,) = find_required_providers(text)
        assert (aws.owner, aws.name) == ("hashicorp", "aws")

    def test_legacy_shorthand(self):
        text = 'required_providers {\n  aws = "~> 3.74.0"\n}\n'
        (aws,) = find_required_providers(text)
        assert aws == ProviderDeclaration(alias="aws", version="~> 3.74.0")

    def test_comments_ignored(self):
        text = (
            "required_providers {\n"
            "  # pinned for the migration\n"
            '  aws = { source = "hashicorp/aws", version = "5.1.0" }\n'
            "}\n"
        )
        (aws,) = find_required_providers(text)
        assert aws.version == "5.1.0"

    def test_comment_with_open_brace(self):
        text = (
            "required_providers {\n"
            "  # old style: aws = {\n"
            '  aws = { source = "hashicorp/aws" version = "5.0.0" }\n'
            "}\n"
        )
        assert [p.alias for p in find_required_providers(text)] == ["aws"]

    def test_block_comment_entry_ignored(self):
        text = (
            "required_providers {\n"
            "  /*\n"
            '  old = { source = "hashicorp/old" version = "1.0.0" }\n'
            "  */\n"
            '  aws = { source = "hashicorp/aws" version = "5.0.0" }\n'
            "}\n"
        )
        assert [p.alias for p in find_required_providers(text)] == ["aws"]

    def test_slash_comment_ignored(self):
        text = (
            "required_providers {\n"
            '  // random = { source = "hashicorp/random" version = "3.0.0" }\n'
            '  aws = "~> 3.74.0"\n'
            "}\n"
        )
        assert [p.alias for p in find_required_providers(text)] == ["aws"]

    def test_no_block(self):
        assert find_required_providers('provider "aws" {\n  region = "eu-west-1"\n}\n') == []


# ── module blocks ────────────────────────────────────────────────────────


class TestModuleBlocks:
    def test_every_block_found(self):
        modules = list(iter_module_blocks(MODULES))
        assert [m.name for m in modules] == ["vpc", "local", "eks"]

    def test_source_verbatim(self):
        first = next(iter_module_blocks(MODULES))
        assert first == ModuleDeclaration(
            name="vpc",
            source="git@github.com:hashicorp/terraform-aws-vpc.git?ref=v2.0.0",
        )

    def test_source_after_other_attributes(self):
        eks = list(iter_module_blocks(MODULES))[2]
        assert eks.source == "https://github.example.com/platform/terraform-eks.git?ref=1.4.0"

    def test_restartable(self):
        assert list(iter_module_blocks(MODULES)) == list(iter_module_blocks(MODULES))

    def test_independent_iterators(self):
        a = iter_module_blocks(MODULES)
        next(a)
        b = iter_module_blocks(MODULES)
        assert next(b).name == "vpc"
        assert next(a).name == "local"

    def test_no_modules(self):
        assert list(iter_module_blocks(TERRAFORM_BLOCK)) == []

    def test_pattern_is_exposed(self):
        assert MODULE_PATTERN.search('module "x" { source = "y" }')

    def test_commented_out_blocks_ignored(self):
        text = (
            '# module "old" {\n'
            '#   source = "git@github.com:org/old.git?ref=v1.0.0"\n'
            "# }\n"
            '/* module "older" { source = "git@github.com:org/older.git?ref=v0.1.0" } */\n'
            'module "new" {\n'
            '  source = "git@github.com:org/new.git?ref=v2.0.0"\n'
            "}\n"
        )
        assert [m.name for m in iter_module_blocks(text)] == ["new"]

    def test_double_slash_in_source_kept(self):
        text = (
            'module "sub" {\n'
            '  source = "git::https://github.com/org/mods.git//vpc?ref=v1.0.0" # pinned\n'
            "}\n"
        )
        (sub,) = iter_module_blocks(text)
        assert sub.source == "git::https://github.com/org/mods.git//vpc?ref=v1.0.0"


# ── comments ─────────────────────────────────────────────────────────────


class TestStripComments:
    def test_line_comments(self):
        assert strip_comments("a = 1 # one\nb = 2 // two\n") == "a = 1 \nb = 2 \n"

    def test_block_comment(self):
        assert strip_comments("a /* x\ny */ = 1") == "a   = 1"

    def test_strings_untouched(self):
        text = 'url = "https://example.com/#top" /* gone */'
        assert strip_comments(text) == 'url = "https://example.com/#top"  '

    def test_commented_required_version(self):
        text = (
            "terraform {\n"
            '  # required_version = "~> 0.12.0"\n'
            '  required_version = "~> 1.5.0"\n'
            "}\n"
        )
        assert find_terraform_block(text).ref_version == "~> 1.5.0"
