# manifest types treated as stable game versions
STABLE_VERSION_TYPES = {"release"}
