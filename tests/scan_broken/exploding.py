raise RuntimeError("module failed to initialize")
