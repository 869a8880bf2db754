# models package
