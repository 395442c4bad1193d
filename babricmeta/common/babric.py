MAVEN_URL = "https://maven.glass-launcher.net/babric/"
MAVEN_CENTRAL_URL = "https://repo1.maven.org/maven2/"
MINECRAFT_MAVEN_URL = "https://libraries.minecraft.net/"

MAPPINGS_METADATA_URL = MAVEN_URL + "babric/barn/maven-metadata.xml"
INTERMEDIARY_METADATA_URL = MAVEN_URL + "babric/intermediary/maven-metadata.xml"
LOADER_METADATA_URL = MAVEN_URL + "babric/fabric-loader/maven-metadata.xml"
INSTALLER_METADATA_URL = MAVEN_URL + "babric/fabric-installer/maven-metadata.xml"

MAPPINGS_PREFIX = "babric:barn:"
INTERMEDIARY_PREFIX = "babric:intermediary:"
LOADER_PREFIX = "babric:fabric-loader:"
INSTALLER_PREFIX = "babric:fabric-installer:"

LOADER_NAME = "fabric-loader"

# number of workers building profiles at once
PROFILE_WORKERS = 2

ASM_ALL_EXCLUSION = "org.ow2.asm:asm-all:*"

# maven coordinate -> repository, appended to every profile in this order
COMPATIBILITY_LIBRARIES = [
    ("babric:log4j-config:1.0.0", MAVEN_URL),
    ("net.minecrell:terminalconsoleappender:1.2.0", MAVEN_CENTRAL_URL),
    ("org.slf4j:slf4j-api:1.8.0-beta4", MINECRAFT_MAVEN_URL),
    ("org.apache.logging.log4j:log4j-slf4j18-impl:2.16.0", MINECRAFT_MAVEN_URL),
    ("org.apache.logging.log4j:log4j-api:2.16.0", MINECRAFT_MAVEN_URL),
    ("org.apache.logging.log4j:log4j-core:2.16.0", MINECRAFT_MAVEN_URL),
    ("com.google.code.gson:gson:2.8.9", MINECRAFT_MAVEN_URL),
    ("com.google.guava:guava:31.0.1-jre", MINECRAFT_MAVEN_URL),
    ("org.apache.commons:commons-lang3:3.12.0", MINECRAFT_MAVEN_URL),
    ("commons-io:commons-io:2.11.0", MINECRAFT_MAVEN_URL),
    ("commons-codec:commons-codec:1.15", MINECRAFT_MAVEN_URL),
]

NATIVE_LIBRARY_TAG = "lwjgl"
NATIVE_BUILD_TAG = "-babric."

# emulates vanilla presence for programs that check the process command line (discord, nvidia hybrid gpu, ..)
PROCESS_MARKER_ARG = "-DFabricMcEmu= net.minecraft.client.main.Main "
CLIENT_JVM_ARGS = [
    PROCESS_MARKER_ARG,
    "-cp",
    "${classpath}",
    "-Djava.library.path=${natives_directory}",
]
