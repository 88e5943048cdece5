from __future__ import annotations

from commit_credits.changelog import extract_changelog, only_modifies_changelogs

MIXED_DIFF = """commit 0f8c1e2d
Author: david <david@5ecf4fe2-1ee6-0310-87b1-e25e094e27de>
Date:   Sat Jan 12 20:04:06 2008 +0000

    Fix case-sensitive validates_uniqueness_of

    git-svn-id: http://svn-commit.rubyonrails.org/rails/trunk@8672 5ecf4fe2-1ee6-0310-87b1-e25e094e27de

diff --git a/activerecord/CHANGELOG b/activerecord/CHANGELOG
index 1111111..2222222 100644
--- a/activerecord/CHANGELOG
+++ b/activerecord/CHANGELOG
@@ -1,3 +1,5 @@
 *SVN*
 
+* Fix case-sensitive validates_uniqueness_of. Closes #11366 [miloops]
+
 * Older entry [someone]
diff --git a/activerecord/lib/active_record/validations.rb b/activerecord/lib/active_record/validations.rb
index 3333333..4444444 100644
--- a/activerecord/lib/active_record/validations.rb
+++ b/activerecord/lib/active_record/validations.rb
@@ -1 +1 @@
-old
+  * looks like a bullet [mallory]
"""


def test_only_modifies_changelogs_true_for_changelog_headers() -> None:
    diff = "diff --git a/CHANGELOG b/CHANGELOG\n+* entry [a]\ndiff --git a/railties/changelog b/railties/changelog\n"
    assert only_modifies_changelogs(diff) is True


def test_only_modifies_changelogs_false_when_code_is_touched() -> None:
    assert only_modifies_changelogs(MIXED_DIFF) is False


def test_only_modifies_changelogs_vacuous_cases() -> None:
    assert only_modifies_changelogs("") is True
    assert only_modifies_changelogs("commit abc\n\n    message only\n") is True


def test_extract_changelog_keeps_only_changelog_bullets() -> None:
    assert extract_changelog(MIXED_DIFF) == "+* Fix case-sensitive validates_uniqueness_of. Closes #11366 [miloops]\n"


def test_extract_changelog_excludes_non_bullet_added_lines() -> None:
    diff = "\n".join(
        [
            "diff --git a/CHANGELOG.md b/CHANGELOG.md",
            "--- a/CHANGELOG.md",
            "+++ b/CHANGELOG.md",
            "@@ -0,0 +1,2 @@",
            "+  * Fixed thing [alice]",
            "+some other line",
            "",
        ]
    )
    assert extract_changelog(diff) == "+  * Fixed thing [alice]\n"


def test_extract_changelog_resets_on_each_file_header() -> None:
    diff = "\n".join(
        [
            "diff --git a/CHANGELOG b/CHANGELOG",
            "+++ b/CHANGELOG",
            "+* first [a]",
            "diff --git a/README b/README",
            "+++ b/README",
            "+* not credited [b]",
            "diff --git a/actionpack/CHANGELOG b/actionpack/CHANGELOG",
            "+++ b/actionpack/CHANGELOG",
            "+ * second [c]",
        ]
    )
    assert extract_changelog(diff) == "+* first [a]\n+ * second [c]"


def test_extract_changelog_ignores_deleted_changelog_and_removed_lines() -> None:
    diff = "\n".join(
        [
            "diff --git a/CHANGELOG b/CHANGELOG",
            "deleted file mode 100644",
            "--- a/CHANGELOG",
            "+++ /dev/null",
            "-* gone [a]",
            "",
        ]
    )
    assert extract_changelog(diff) == ""


CHANGELOG_AND_TASK_DIFF = "\n".join(
    [
        "diff --git a/CHANGELOG b/CHANGELOG",
        "--- a/CHANGELOG",
        "+++ b/CHANGELOG",
        "+* Add changelog task [bob]",
        "diff --git a/lib/tasks/changelog.rb b/lib/tasks/changelog.rb",
        "--- a/lib/tasks/changelog.rb",
        "+++ b/lib/tasks/changelog.rb",
        "+  * not an entry [mallory]",
        "",
    ]
)


def test_only_modifies_changelogs_false_for_code_named_changelog() -> None:
    assert only_modifies_changelogs(CHANGELOG_AND_TASK_DIFF) is False


def test_extract_changelog_skips_code_named_changelog() -> None:
    assert extract_changelog(CHANGELOG_AND_TASK_DIFF) == "+* Add changelog task [bob]\n"
