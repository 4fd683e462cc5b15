import os
import tempfile

# Preferences and logs go to a throwaway directory; must happen before wagonflow.config is imported.
os.environ.setdefault("WAGONFLOW_HOME", tempfile.mkdtemp(prefix="wagonflow_test_"))
