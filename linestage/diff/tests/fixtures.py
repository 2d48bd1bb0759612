"""Diff texts shared by the diff test modules."""

MODIFIED_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 3b18e51..a9c3f2d 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,2 +1,3 @@
 def main():
+    setup()
     run()
"""

MODIFIED_PATCH = """\
diff --git a/src/app.py b/src/app.py
--- a/src/app.py
+++ b/src/app.py
@@ -1,2 +1,3 @@
 def main():
+    setup()
     run()
"""

TWO_HUNK_DIFF = """\
--- a/f.txt
+++ b/f.txt
@@ -1,3 +1,4 @@
 a
+b
 c
 d
@@ -10,3 +11,2 @@ def helper():
 j
-k
 l
"""

THREE_HUNK_DIFF = """\
--- a/f.txt
+++ b/f.txt
@@ -1,2 +1,3 @@
 a
+a2
 b
@@ -10,2 +11,3 @@
 j
+j2
 k
@@ -20,2 +22,3 @@
 t
+t2
 u
"""

NEW_FILE_DIFF = """\
diff --git a/notes.txt b/notes.txt
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/notes.txt
@@ -0,0 +1,5 @@
+one
+two
+three
+four
+five
"""

DELETED_FILE_DIFF = """\
diff --git a/old.txt b/old.txt
deleted file mode 100644
index 1e2f3a4..0000000
--- a/old.txt
+++ /dev/null
@@ -1,3 +0,0 @@
-alpha
-beta
-gamma
"""

# old "a\nb" -> new "a\nc", neither ends with a newline
REPLACED_LAST_LINE_DIFF = """\
--- a/f.txt
+++ b/f.txt
@@ -1,2 +1,2 @@
 a
-b
\\ No newline at end of file
+c
\\ No newline at end of file
"""

# old "a\nb\n" -> new "a\nb\nc\nd" without a final newline
APPENDED_NO_NEWLINE_DIFF = """\
--- a/f.txt
+++ b/f.txt
@@ -1,2 +1,4 @@
 a
 b
+c
+d
\\ No newline at end of file
"""

BINARY_DIFF = """\
diff --git a/logo.png b/logo.png
index 1234567..89abcde 100644
Binary files a/logo.png and b/logo.png differ
"""

EMPTY_NEW_FILE_DIFF = """\
diff --git a/empty.txt b/empty.txt
new file mode 100644
index 0000000..e69de29
"""
